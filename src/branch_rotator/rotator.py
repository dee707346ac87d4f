"""Branch rotation.

A rotation picks one branch at random, checks it out in the configured
repository, waits for the switch delay and runs the repository's publish
executable.  Any failing step aborts the steps after it.

Concurrent rotations against the same checkout race on its working tree and
are not supported; no locking is attempted.
"""

from __future__ import annotations

import logging
import random
import sys
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from .config import Config
from .errors import CheckoutError, ConfigError, PublishError
from .runner import CommandRunner, LocalRunner
from .telemetry.run_store import RunStore, StepRecord

logger = logging.getLogger(__name__)

# Git must never block waiting for credentials
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


@dataclass
class RotationResult:
    """Outcome of a completed rotation."""

    branch: str
    checkout: StepRecord
    publish: StepRecord
    steps: RunStore = field(default_factory=RunStore)


def select_branch(branches: Sequence[str], rng: random.Random | None = None) -> str:
    """Return one of ``branches`` chosen uniformly at random.

    ``random.Random.choice`` draws a bounded index in ``[0, len(branches))``
    without modulo bias.

    :raises ConfigError: if ``branches`` is empty
    """
    if not branches:
        raise ConfigError("Branch list is empty; cannot select a branch")
    return (rng or random).choice(branches)


def _record(name: str, argv: Sequence[str], cwd: Path, result: dict[str, object]) -> StepRecord:
    return StepRecord(
        name=name,
        argv=list(argv),
        cwd=str(cwd),
        exit_code=int(result.get("exit_code", 1)),
        stdout=str(result.get("stdout", "") or ""),
        stderr=str(result.get("stderr", "") or ""),
        duration_ms=int(result.get("duration_ms", 0)),
        started_at=float(result.get("started_at", 0.0)),
        finished_at=float(result.get("finished_at", 0.0)),
    )


def ensure_checkout_dir(checkout_path: Path) -> None:
    """Raise ``CheckoutError`` unless ``checkout_path`` is an existing directory."""
    if not checkout_path.exists():
        raise CheckoutError(f"Checkout directory '{checkout_path}' does not exist")
    if not checkout_path.is_dir():
        raise CheckoutError(f"Checkout path '{checkout_path}' is not a directory")


def switch_checkout(
    branch: str,
    checkout_path: Path,
    runner: CommandRunner,
    git: str = "git",
) -> StepRecord:
    """Check out ``branch`` in the repository at ``checkout_path``.

    Git's own diagnostics are included in the error when the switch fails,
    e.g. for an unknown branch, a dirty working tree or a directory that is
    not a repository.
    """
    ensure_checkout_dir(checkout_path)

    # The trailing "--" stops git from reading an unknown branch name as a path
    argv = [git, "checkout", branch, "--"]
    result = runner.run(argv, checkout_path, capture=True, env=GIT_ENV)
    record = _record("checkout", argv, checkout_path, result)

    if record.stderr:
        logger.debug("git checkout stderr: %s", record.stderr.strip())
    if not record.ok:
        raise CheckoutError(
            f"Failed to check out branch '{branch}' (exit {record.exit_code}): {record.stderr.strip()}",
            exit_code=record.exit_code,
            stderr=record.stderr,
        )
    return record


def resolve_publish_command(command: Sequence[str], checkout_path: Path) -> list[str]:
    """Anchor a relative executable path such as ``./publish.sh`` to the checkout.

    Bare names like ``make`` are left alone so they are looked up on PATH.
    """
    executable, *args = command
    if "/" in executable and not Path(executable).is_absolute():
        executable = str(checkout_path / executable)
    return [executable, *args]


def publish(checkout_path: Path, command: Sequence[str], runner: CommandRunner) -> StepRecord:
    """Run the publish executable from the checkout directory.

    The executable's output goes straight to the terminal; only its exit
    status is inspected.
    """
    argv = resolve_publish_command(command, checkout_path)
    result = runner.run(argv, checkout_path, capture=False)
    record = _record("publish", argv, checkout_path, result)

    if not record.ok:
        detail = f": {record.stderr.strip()}" if record.stderr.strip() else ""
        raise PublishError(
            f"Publish command {argv[0]} failed with exit code {record.exit_code}{detail}",
            exit_code=record.exit_code,
        )
    return record


class Rotator:
    """Runs one rotation: select, check out, wait, publish."""

    def __init__(
        self,
        config: Config,
        runner: CommandRunner | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or LocalRunner()
        self.rng = rng
        self.sleep = sleep or time.sleep
        self.out = out or sys.stdout

    def _emit(self, line: str) -> None:
        print(line, file=self.out, flush=True)

    def run(self) -> RotationResult:
        """Perform the rotation and return its step records.

        :raises ConfigError: if the branch list is empty
        :raises CheckoutError: if the checkout is unusable or git fails
        :raises PublishError: if the publish executable fails
        """
        config = self.config
        steps = RunStore()
        self._emit("started")

        branch = select_branch(config.branches, self.rng)
        checkout_path = config.checkout_path
        ensure_checkout_dir(checkout_path)
        logger.info("Selected branch %s of %d in %s", branch, len(config.branches), checkout_path)
        self._emit(f"branch: {branch}")

        checkout = switch_checkout(branch, checkout_path, self.runner, git=config.git_executable)
        steps.add(checkout)
        logger.info("Checked out %s in %d ms", branch, checkout.duration_ms)

        if config.switch_delay_ms:
            logger.debug("Waiting %d ms before publishing", config.switch_delay_ms)
            self.sleep(config.switch_delay_s)

        try:
            published = publish(checkout_path, config.publish_command, self.runner)
        except PublishError:
            logger.error("Publish step failed after checking out %s", branch)
            raise
        steps.add(published)
        logger.info("Published %s in %d ms", branch, published.duration_ms)

        return RotationResult(branch=branch, checkout=checkout, publish=published, steps=steps)
