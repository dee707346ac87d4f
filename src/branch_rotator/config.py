"""Configuration loading for Branch Rotator.

This module loads environment variables from a `.env` file using
`python-dotenv` and populates a `Config` object.

Required variables:
- ROTATOR_CHECKOUT_PATH

Optional variables with defaults:
- ROTATOR_BRANCHES (default: the built-in branch list)
- ROTATOR_SWITCH_DELAY_MS (default: 100)
- ROTATOR_PUBLISH_COMMAND (default: './publish.sh')
- ROTATOR_GIT (default: 'git')
- LOG_LEVEL (default: 'INFO')
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .constants import (
    DEFAULT_BRANCHES,
    DEFAULT_GIT_EXECUTABLE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PUBLISH_COMMAND,
    DEFAULT_SWITCH_DELAY_MS,
)
from .errors import ConfigError


def parse_branches(value: str) -> tuple[str, ...]:
    """Split a comma separated branch list, dropping blank items."""
    return tuple(name.strip() for name in value.split(",") if name.strip())


@dataclass(frozen=True)
class Config:
    """Configuration values loaded from the environment."""

    checkout_path: Path
    branches: tuple[str, ...] = DEFAULT_BRANCHES
    switch_delay_ms: int = DEFAULT_SWITCH_DELAY_MS
    publish_command: tuple[str, ...] = (DEFAULT_PUBLISH_COMMAND,)
    git_executable: str = DEFAULT_GIT_EXECUTABLE
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not self.branches:
            raise ConfigError("Branch list is empty; at least one branch name is required")
        if not self.publish_command:
            raise ConfigError("Publish command is empty")
        if self.switch_delay_ms < 0:
            raise ConfigError(f"Switch delay must not be negative, got {self.switch_delay_ms} ms")

    @property
    def switch_delay_s(self) -> float:
        return self.switch_delay_ms / 1000

    @classmethod
    def load_from_env(cls) -> Config:
        """Load configuration from environment variables.

        The `.env` file is loaded if present.  Raises `ConfigError` if a
        required variable is missing or a value cannot be parsed.
        """
        load_dotenv()

        # Required: ROTATOR_CHECKOUT_PATH
        checkout_path = os.getenv("ROTATOR_CHECKOUT_PATH")
        if not checkout_path:
            raise ConfigError("Missing required environment variable: ROTATOR_CHECKOUT_PATH")

        # Optional: ROTATOR_BRANCHES with default.  Set but blank means empty.
        branches_str = os.getenv("ROTATOR_BRANCHES")
        branches = parse_branches(branches_str) if branches_str is not None else DEFAULT_BRANCHES

        delay_str = os.getenv("ROTATOR_SWITCH_DELAY_MS", str(DEFAULT_SWITCH_DELAY_MS))
        try:
            switch_delay_ms = int(delay_str)
        except ValueError as exc:
            raise ConfigError(f"ROTATOR_SWITCH_DELAY_MS must be an integer, got {delay_str!r}") from exc

        publish_str = os.getenv("ROTATOR_PUBLISH_COMMAND", DEFAULT_PUBLISH_COMMAND)
        try:
            publish_command = tuple(shlex.split(publish_str))
        except ValueError as exc:
            raise ConfigError(f"ROTATOR_PUBLISH_COMMAND could not be parsed: {exc}") from exc

        return cls(
            checkout_path=Path(checkout_path).expanduser(),
            branches=branches,
            switch_delay_ms=switch_delay_ms,
            publish_command=publish_command,
            git_executable=os.getenv("ROTATOR_GIT", DEFAULT_GIT_EXECUTABLE),
            log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
