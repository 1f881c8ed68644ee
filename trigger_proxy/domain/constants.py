# Mapping file
MAPPING_DELIMITER = ";"
KEY_SEPARATOR = "|"
DEFAULT_MAPPING_FILE = "mapping.csv"
PLAIN_RECORD_FIELDS = 3  # repo;branch;job
FILE_RECORD_FIELDS = 4  # repo;branch;job;file
JOB_FIELD_INDEX = 2  # Job is always the third column

# Inbound events
DEFAULT_BRANCH = "master"

# Debounce
DEFAULT_QUIET_PERIOD_SECONDS = 10

# Outbound trigger
DISPATCH_TIMEOUT_SECONDS = 5.0

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

# Dispatch log
EVENT_LOG_MAXLEN = 100  # Max dispatch outcomes kept in memory
