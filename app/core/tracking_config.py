from datetime import timedelta

# --------------------------------------------------
# CLIENT EMISSION
# --------------------------------------------------

# Degrees; roughly 11 meters at the equator
MOVEMENT_THRESHOLD_DEGREES = 1e-4

# Send a sample at least this often even when standing still
HEARTBEAT_INTERVAL = timedelta(seconds=30)

# --------------------------------------------------
# AGGREGATION
# --------------------------------------------------

LOCATION_HISTORY_LIMIT = 50
UNKNOWN_NAME = "Unknown"
UNKNOWN_CLASS = "N/A"

# --------------------------------------------------
# ADMIN POLLING
# --------------------------------------------------

LOCATION_POLL_SECONDS = 5
NOTIFICATION_POLL_SECONDS = 15

# How long a live alert stays on screen
LIVE_ALERT_TTL = timedelta(seconds=5)

# --------------------------------------------------
# WEATHER AUTO MODE
# --------------------------------------------------

WEATHER_POLL_SECONDS = 10 * 60
WEATHER_ALERT_COOLDOWN = timedelta(hours=24)

WEATHER_KEYWORDS = (
    "typhoon",
    "storm",
    "cyclone",
    "hurricane",
    "signal no",
    "hanging amihan",
    "tropical depression",
)

# --------------------------------------------------
# NOTIFICATIONS
# --------------------------------------------------

NOTIFICATION_LIST_LIMIT = 50
MIN_PASSWORD_LENGTH = 6
