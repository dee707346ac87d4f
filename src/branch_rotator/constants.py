"""Default values for Branch Rotator.

Every value here can be overridden through the environment; see
``branch_rotator.config``.
"""

# Branches rotated through when ROTATOR_BRANCHES is not set
DEFAULT_BRANCHES = (
    "nextjs",
    "javascript",
    "react",
    "python",
    "java",
    "spring",
    "vue",
    "redux",
    "main",
)

# Pause between the checkout and the publish step
DEFAULT_SWITCH_DELAY_MS = 100

# Resolved against the checkout directory when relative
DEFAULT_PUBLISH_COMMAND = "./publish.sh"

DEFAULT_GIT_EXECUTABLE = "git"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Exit statuses for failures that have no child process status to report
EXIT_CONFIG_ERROR = 2
EXIT_CHECKOUT_MISSING = 1
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
EXIT_INTERRUPTED = 130
