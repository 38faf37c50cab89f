"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DAYS_PER_MONTH = 30
HOURS_PER_DAY = 24

PREVIEW_DURATIONS_HOURS = (1, 2, 4, 8, 12, 24)

DEFAULT_HISTORY_LIMIT = 30
TOP_PERSONS_LIMIT = 10

# (label, inclusive upper bound); None means unbounded.
DEDUCTION_RANGES = (
    ("0-100", 100),
    ("101-500", 500),
    ("501-1000", 1000),
    ("1001-2000", 2000),
    ("2000+", None),
)

STATISTICS_CACHE_KEY = "checkout_deduction_statistics_v1"
STATISTICS_CACHE_TTL_SECONDS = 30
STATISTICS_LOCK_SECONDS = 15
STATISTICS_POLL_INTERVAL_MS = 100
STATISTICS_MAX_WAIT_MS = 3000
