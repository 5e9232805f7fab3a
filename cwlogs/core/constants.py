"""Constants used throughout the core modules."""

# Log store paging
MAX_EVENTS_PER_REQUEST = 10000  # CloudWatch FilterLogEvents cap

# Live tailing
TAIL_LOOKBACK_MS = 60 * 1000
TAIL_IDLE_INTERVAL_SECONDS = 1.0

# Snapshot mode of `tail` (no --follow)
SNAPSHOT_LOOKBACK_MS = 5 * 60 * 1000
SNAPSHOT_LIMIT = 100

# Default query window when no time bounds are given
DEFAULT_QUERY_WINDOW_MS = 60 * 60 * 1000

# Table formatting
MAX_COLUMN_WIDTH = 100
MIN_FIXED_COLUMN_WIDTH = 9
ELLIPSIS = "..."
FIXED_COLUMNS = ("timestamp", "log_group")
MAX_FLATTEN_DEPTH = 64

# Display
UNKNOWN_TIME = "Unknown time"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

# Configuration
DEFAULT_REGION = "us-east-1"
DEFAULT_OUTPUT = "colored"
OUTPUT_MODES = ("colored", "plain")
DEFAULT_MAX_EVENTS = 1000
DEFAULT_LOG_LEVEL = "WARNING"
