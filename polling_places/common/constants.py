"""Application constants."""

USER_AGENT = "polling-places/0.3 (+opendataphilly; contact: configured-email)"
STAGES = (
    "fetch",
    "aggregate",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
WGS84_EPSG = 4326
RAW_SNAPSHOT_PATH = "raw/polling_places.geojson"
MISSING_KEY_POLICIES = ("group", "reject")
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
