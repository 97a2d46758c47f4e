"""
CLI interface for batch analytics jobs.

Usage:
    python -m tools.analytics.cli init-db
    python -m tools.analytics.cli classify [--user-id <user_id>] [--reclassify]
    python -m tools.analytics.cli skill-level --user-id <user_id> [--lookback-days 56]
    python -m tools.analytics.cli recalibrate --plan-id <plan_id>
    python -m tools.analytics.cli recalibrate --user-email <email>
    python -m tools.analytics.cli list-activities --user-id <user_id>
"""

import asyncio
import json
import logging
import sys

import click

from app.config import settings
from app.db.session import AsyncSessionLocal, init_db
from app.shared.exceptions import AnalyticsError
from app.shared.formatters import format_distance_km, format_duration_minutes, format_pace
from app.features.activities import ActivityRepository, VariationRepository
from app.features.plans import PlanRepository
from app.features.users import UserRepository
from app.features.classification import WorkoutClassificationService
from app.features.skill_level import SkillLevelService
from app.features.safety import PlanRecalibrationService


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level):
    """Analytics tools for Peak Analytics."""
    logging.basicConfig(
        level=getattr(logging, (log_level or settings.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


@cli.command("init-db")
def init_db_command():
    """Create all tables."""
    init_db()
    click.echo("Database initialized")


@cli.command()
@click.option("--user-id", default=None, help="Only classify this user's activities")
@click.option("--reclassify", is_flag=True, help="Re-derive and overwrite existing labels")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
def classify(user_id, reclassify, as_json):
    """
    Classify workout types.

    By default only activities without a label are processed.
    """
    try:
        result = asyncio.run(_classify(user_id, reclassify))
    except AnalyticsError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"Processed: {result.processed}")
    click.echo(f"Updated:   {result.updated}")
    if result.errors:
        click.echo(f"Errors:    {len(result.errors)}")
        for error in result.errors:
            click.echo(f"  - {error.user_id} [{error.stage}] {error.message}")


async def _classify(user_id, reclassify):
    async with AsyncSessionLocal() as session:
        service = WorkoutClassificationService(
            ActivityRepository(session, page_size=settings.history_page_size),
            VariationRepository(session),
        )
        return await service.run(user_id=user_id, reclassify=reclassify)


@cli.command("skill-level")
@click.option("--user-id", required=True, help="User ID to place")
@click.option("--lookback-days", default=None, type=int, help="Requested lookback window")
@click.option("--seed", default=None, type=int, help="k-means++ seed")
def skill_level(user_id, lookback_days, seed):
    """Estimate a user's skill tier against the active population."""
    try:
        result = asyncio.run(_skill_level(user_id, lookback_days, seed))
    except AnalyticsError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(result.to_dict(), indent=2))


async def _skill_level(user_id, lookback_days, seed):
    async with AsyncSessionLocal() as session:
        service = SkillLevelService(
            ActivityRepository(session, page_size=settings.history_page_size),
            seed=seed,
        )
        return await service.estimate(user_id, lookback_days=lookback_days)


@cli.command()
@click.option("--plan-id", default=None, help="Plan to recalibrate")
@click.option("--user-email", default=None, help="Recalibrate this user's active plan")
def recalibrate(plan_id, user_email):
    """Fix unsafe paces in a stored training plan."""
    if not plan_id and not user_email:
        raise click.UsageError("--plan-id or --user-email required")

    try:
        result = asyncio.run(_recalibrate(plan_id, user_email))
    except AnalyticsError as e:
        raise click.ClickException(str(e))

    paces = result.safe_paces
    click.echo(f"Plan {result.plan_id}: safe paces from {paces.source}")
    click.echo(f"  5K   {format_pace(paces.pace_5k)}")
    click.echo(f"  10K  {format_pace(paces.pace_10k)}")
    click.echo(f"  Half {format_pace(paces.pace_half_marathon)}")
    click.echo(f"  Easy {format_pace(paces.pace_easy)}")
    click.echo()
    for correction in result.corrections:
        if not correction.changed:
            continue
        click.echo(
            f"  {correction.title or correction.workout_type}: "
            f"{format_pace(correction.original_pace)} -> {format_pace(correction.safe_pace)}, "
            f"{format_duration_minutes(correction.original_duration)} -> "
            f"{format_duration_minutes(correction.safe_duration)}"
        )
    click.echo()
    click.echo(
        f"{result.critical_issues_fixed} critical issues fixed "
        f"in {result.total_workouts_processed} workouts"
    )


def _recalibration_service(session) -> PlanRecalibrationService:
    return PlanRecalibrationService(
        plan_repo=PlanRepository(session),
        activity_repo=ActivityRepository(session, page_size=settings.history_page_size),
        user_repo=UserRepository(session),
    )


async def _recalibrate(plan_id, user_email):
    async with AsyncSessionLocal() as session:
        service = _recalibration_service(session)
        return await service.recalibrate(plan_id=plan_id, user_email=user_email)


@cli.command("list-activities")
@click.option("--user-id", required=True, help="User ID")
@click.option("--limit", default=20, type=int, help="Number of activities to show")
def list_activities(user_id, limit):
    """List a user's recent activities with their detected type."""
    asyncio.run(_list_activities(user_id, limit))


async def _list_activities(user_id: str, limit: int):
    from sqlalchemy import select
    from app.features.activities import Activity

    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(Activity.activity_date.desc(), Activity.id.desc())
            .limit(limit)
        )
        activities = [row.to_record() for row in result.scalars().all()]

    if not activities:
        click.echo("No activities found for this user.")
        return

    click.echo(f"Recent activities for user {user_id[:8]}...:")
    click.echo("-" * 80)
    click.echo(f"{'Date':10} | {'Type':12} | {'Dist':>8} | {'Pace':>9} | {'HR':>4} | Detected")
    click.echo("-" * 80)
    for a in activities:
        day = a.activity_date.isoformat() if a.activity_date else ""
        hr = f"{a.avg_hr:.0f}" if a.avg_hr else "-"
        click.echo(
            f"{day:10} | {(a.activity_type or '')[:12]:12} | {format_distance_km(a.distance_km):>8} | "
            f"{format_pace(a.pace_min_per_km):>9} | {hr:>4} | {a.detected_workout_type or '-'}"
        )


if __name__ == "__main__":
    cli()
