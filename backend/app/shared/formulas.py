"""
Mathematical formulas for pace and race-time calculations.

These formulas are used by different calculators across the application.
Centralizing them here eliminates duplication and ensures consistency.
"""

RIEGEL_EXPONENT = 1.06
HALF_MARATHON_KM = 21.0975


def riegel_predicted_time(
    base_time: float,
    base_distance_km: float,
    target_distance_km: float,
    exponent: float = RIEGEL_EXPONENT,
) -> float:
    """
    Predict a race time using Riegel's endurance formula (1977).

    Formula: t2 = t1 * (d2 / d1) ^ 1.06

    Args:
        base_time: Known time over base distance (any unit)
        base_distance_km: Distance of the known effort
        target_distance_km: Distance to predict
        exponent: Fatigue exponent (1.06 for trained runners)

    Returns:
        Predicted time in the same unit as base_time

    References:
        Riegel, P. (1977). Time Predicting. Runner's World.
    """
    if base_distance_km <= 0:
        raise ValueError("base_distance_km must be positive")
    return base_time * (target_distance_km / base_distance_km) ** exponent


def riegel_pace(
    base_pace_min_km: float,
    base_distance_km: float,
    target_distance_km: float,
    exponent: float = RIEGEL_EXPONENT,
) -> float:
    """
    Equivalent pace (min/km) over target distance.

    Builds the synthetic base time (pace * distance), extrapolates it with
    Riegel and divides by the target distance.
    """
    base_time = base_pace_min_km * base_distance_km
    predicted = riegel_predicted_time(
        base_time, base_distance_km, target_distance_km, exponent
    )
    return predicted / target_distance_km


def speed_ms_to_pace(speed_m_s: float | None) -> float | None:
    """Convert speed (m/s) to pace (min/km). None for non-positive speed."""
    if speed_m_s is None or speed_m_s <= 0:
        return None
    return 1000 / (speed_m_s * 60)


def pace_to_speed_ms(pace_min_km: float | None) -> float | None:
    """Convert pace (min/km) to speed (m/s). None for non-positive pace."""
    if pace_min_km is None or pace_min_km <= 0:
        return None
    return 1000 / (pace_min_km * 60)
