# Column widths of the persisted redirect record
MAX_SOURCE_URI_PATH_LENGTH = 4000
MAX_TARGET_URI_PATH_LENGTH = 500
URI_PATH_HASH_LENGTH = 32  # hex MD5 digest

# Accepted HTTP status code range
MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599

# Redis key segment used in place of the host for global (host-less) redirects
GLOBAL_HOST_KEY = '*'

# Application environment
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AWS AppConfig identifiers
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
