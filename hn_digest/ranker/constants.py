"""Constants for the ranker module."""

# Stories kept after ranking; deployments use 5 or 10
DEFAULT_STORY_CAP: int = 10
SHORT_STORY_CAP: int = 5

# Stories older than this (when their creation time is known) are excluded
RECENCY_WINDOW_SECONDS: int = 24 * 60 * 60

# Relevance differences up to this many points are treated as a tie
RELEVANCE_TIE_BAND: int = 5

# Drop reasons
DROP_MISSING_TITLE = "missing_title"
DROP_BELOW_THRESHOLD = "below_threshold"
DROP_STALE = "stale"
DROP_OVER_CAP = "over_cap"
