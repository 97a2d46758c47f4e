"""
Batch analytics tools.

Usage:
    python -m tools.analytics.cli classify --user-id <user_id>
    python -m tools.analytics.cli skill-level --user-id <user_id>
    python -m tools.analytics.cli recalibrate --plan-id <plan_id>
"""
