"""
Application-wide constants for the log scrubber.
"""

APP_NAME = "log-scrubber"
VERSION = "0.10.0"
DESCRIPTION = "Scrubs identifying information from line-oriented log files."

# File naming
DEFAULT_CONFIG_FILE = "scrubber_config.json"
CONFIG_ENV_VAR = "LOG_SCRUBBER_CONFIG"
SCRUB_SUFFIX = "_scrubbed"
AUDIT_SUFFIX = "_audit"
EXT_CSV = ".csv"
EXT_JSON = ".json"
EXT_GZ = ".gz"

# Audit file types
AUDIT_TYPE_CSV = "csv"
AUDIT_TYPE_JSON = "json"
AUDIT_TYPES = (AUDIT_TYPE_CSV, AUDIT_TYPE_JSON)
AUDIT_CSV_HEADER = ["Original Value", "New Value", "Times Replaced", "Type", "Source"]

# Scrubbing levels
SCRUB_LEVEL_LOW = 1
SCRUB_LEVEL_MEDIUM = 2
SCRUB_LEVEL_HIGH = 3
SCRUB_LEVELS = (SCRUB_LEVEL_LOW, SCRUB_LEVEL_MEDIUM, SCRUB_LEVEL_HIGH)

# Replacement kinds, as written to the audit trail
TYPE_EMAIL = "email"
TYPE_USERNAME = "username"
TYPE_IP = "ip"
TYPE_UID = "uid"

# Email rendering
DEFAULT_DOMAIN = "example.com"
FIXED_EMAIL_DOMAIN = "domain.com"
USER_PREFIX = "user"
DOMAIN_PREFIX = "domain"

# UID masking
MIN_UID_LENGTH = 20
UID_TARGET_LENGTH = 26
UID_KEEP_CHARS = 4
MASK_CHAR = "*"

# Processing
PROGRESS_INTERVAL = 1000
MAX_JSON_FAILURE_SAMPLES = 10
JSON_FAILURE_SAMPLE_LENGTH = 100

# Overwrite actions
OVERWRITE_PROMPT = "prompt"
OVERWRITE_OVERWRITE = "overwrite"
OVERWRITE_TIMESTAMP = "timestamp"
OVERWRITE_CANCEL = "cancel"
OVERWRITE_ACTIONS = (
    OVERWRITE_PROMPT,
    OVERWRITE_OVERWRITE,
    OVERWRITE_TIMESTAMP,
    OVERWRITE_CANCEL,
)

# 150MB
DEFAULT_MAX_FILE_SIZE = 150 * 1024 * 1024
