"""
Analytics error hierarchy.

Insufficient data is never an exception: calculators return explicit
result states. These errors cover the I/O boundary only.
"""


class AnalyticsError(Exception):
    """Base error for analytics operations."""
    pass


class HistoryUnavailableError(AnalyticsError):
    """The activity history store could not be read; the batch is aborted."""
    pass


class PlanNotFoundError(AnalyticsError):
    """Training plan does not exist."""
    pass


class EmptyPlanError(AnalyticsError):
    """Training plan has no workouts to recalibrate."""
    pass
