"""Constants shared across the flight telemetry logger."""

# Placeholder rendered for any unknown value.
PLACEHOLDER = "—"

# Persisted session layout: <sessions_directory>/<session_id>/<session_id><suffix>
RECORDS_ARTIFACT_SUFFIX = ".json"
SUMMARY_ARTIFACT_SUFFIX = ".summary.json"
EVENTS_ARTIFACT_SUFFIX = ".events.json"
LIVE_EVENTS_FILENAME = "live-events.json"
CREATED_STAMP_FILENAME = ".created"

ARTIFACT_RECORDS = "records"
ARTIFACT_SUMMARY = "summary"
ARTIFACT_EVENTS = "events"

DEFAULT_MAX_RECORDS_IN_MEMORY = 1000

EARTH_RADIUS_METERS = 6_371_000.0
