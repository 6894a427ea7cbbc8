"""Constants for team-level catalogue synchronization."""

# Settings table keys
LAST_SYNC_SETTING_KEY = "last_sync_timestamp"
REMOTE_ENV_SETTING_KEY = "remote_env"

DEFAULT_POLL_INTERVAL_SECONDS = 5 * 60
POLL_JOB_ID = "team_sync"

NOT_CONNECTED_MESSAGE = "remote store not connected"
ALREADY_RUNNING_MESSAGE = "sync already in progress"
