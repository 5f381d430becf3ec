"""Shared, deterministic timestamps for tests."""

from datetime import UTC, datetime


# Fixed timestamp to keep recency windows deterministic across environments.
FIXED_NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=UTC)
FIXED_NOW_TS = int(FIXED_NOW.timestamp())

ONE_HOUR = 60 * 60
ONE_DAY = 24 * ONE_HOUR
