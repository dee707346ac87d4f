"""Exceptions raised by Branch Rotator.

Each exception carries the exit status the command line entrypoint should
terminate with.
"""

from __future__ import annotations

from .constants import EXIT_CHECKOUT_MISSING, EXIT_CONFIG_ERROR


class RotatorError(RuntimeError):
    """Base class for rotation failures."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(RotatorError):
    """Configuration is missing or invalid.  Raised before any side effect."""

    def __init__(self, message: str) -> None:
        super().__init__(message, exit_code=EXIT_CONFIG_ERROR)


class CheckoutError(RotatorError):
    """The branch switch failed, or the checkout directory is unusable."""

    def __init__(self, message: str, exit_code: int = EXIT_CHECKOUT_MISSING, stderr: str = "") -> None:
        super().__init__(message, exit_code=exit_code)
        self.stderr = stderr


class PublishError(RotatorError):
    """The publish executable failed or could not be started."""
