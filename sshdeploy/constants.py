"""
sshdeploy Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Default Connection Configuration
DEFAULT_SSH_PORT = 22
DEFAULT_READY_TIMEOUT = 20  # seconds

# Default Artifact Configuration
DEFAULT_SOURCE = "build"
DEFAULT_MAX_BUFFER = 200 * 1024  # bytes per output stream

# Archive Configuration
ARCHIVE_NAME = "deploy.tgz"
GNU_TAR_MARKER = "GNU tar"
TAR_VERSION_COMMAND = "tar --version"

# Option defaults merged under user-supplied settings
DEFAULT_OPTIONS = {
    "port": DEFAULT_SSH_PORT,
    "source": DEFAULT_SOURCE,
    "target": None,
    "zip": True,
    "exclude": (),
    "before": None,
    "after": None,
    "cover": True,
    "debug": False,
    "max_buffer": DEFAULT_MAX_BUFFER,
    "ready_timeout": DEFAULT_READY_TIMEOUT,
    "password": None,
    "private_key": None,
    "passphrase": None,
}

# Option-file spellings mapped to config field names
OPTION_ALIASES = {
    "from": "source",
    "to": "target",
    "privateKey": "private_key",
    "maxBuffer": "max_buffer",
}

# readyTimeout is given in milliseconds in option files
READY_TIMEOUT_MS_KEY = "readyTimeout"

# Environment variables consulted for credentials
ENV_PASSWORD = "SSHDEPLOY_PASSWORD"
ENV_PRIVATE_KEY = "SSHDEPLOY_PRIVATE_KEY"
ENV_PASSPHRASE = "SSHDEPLOY_PASSPHRASE"

# Log Configuration
DEFAULT_LOG_DIR = ".sshdeploy/logs"
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"

# Pipeline stage names, in execution order
STAGE_ZIP_LOCAL = "zip_local"
STAGE_BEFORE_DEPLOY = "before_deploy"
STAGE_CLEAN_REMOTE = "clean_remote"
STAGE_UPLOAD = "upload"
STAGE_UNZIP_REMOTE = "unzip_remote"
STAGE_AFTER_DEPLOY = "after_deploy"
STAGE_DELETE_LOCAL_ZIP = "delete_local_zip"

STAGE_ORDER = [
    STAGE_ZIP_LOCAL,
    STAGE_BEFORE_DEPLOY,
    STAGE_CLEAN_REMOTE,
    STAGE_UPLOAD,
    STAGE_UNZIP_REMOTE,
    STAGE_AFTER_DEPLOY,
    STAGE_DELETE_LOCAL_ZIP,
]

STAGE_TITLES = {
    STAGE_ZIP_LOCAL: "Zipping local files",
    STAGE_BEFORE_DEPLOY: "Before deploy remote commands",
    STAGE_CLEAN_REMOTE: "Cleaning remote old files",
    STAGE_UPLOAD: "Uploading artifact",
    STAGE_UNZIP_REMOTE: "Unzipping remote archive",
    STAGE_AFTER_DEPLOY: "After deploy remote commands",
    STAGE_DELETE_LOCAL_ZIP: "Local cleanup",
}

# Tool Names (for doctor check)
REQUIRED_TOOLS = [
    "tar",
    "rm",
]
