"""Pytest configuration and fixtures for Branch Rotator tests.

This module provides a RecordingRunner for tests that must not touch git,
and fixtures that build a real throwaway repository with a stub publish
script for end-to-end runs.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from branch_rotator.config import Config

BRANCHES = ("nextjs", "react", "python", "main")

GIT_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@test.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@test.com",
}

# Appends "<epoch seconds>" to publish.log and exits with $PUBLISH_EXIT
PUBLISH_SCRIPT = """#!/bin/sh
"{python}" -c 'import time; print(repr(time.time()))' >> "$(dirname "$0")/../publish.log"
exit "${PUBLISH_EXIT:-0}"
"""

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


class RecordingRunner:
    """A runner that records calls and returns canned exit codes.

    This is ONLY for testing - not used in production.
    """

    def __init__(self, exit_codes: Mapping[str, int] | None = None, stderr: str = "") -> None:
        self.exit_codes = dict(exit_codes or {})
        self.stderr = stderr
        self.calls: list[dict[str, object]] = []

    def run(
        self,
        argv: Sequence[str],
        cwd: Path,
        capture: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> dict[str, object]:
        name = "checkout" if "checkout" in argv else "publish"
        now = time.time()
        self.calls.append({"name": name, "argv": list(argv), "cwd": cwd, "capture": capture, "at": now})
        exit_code = self.exit_codes.get(name, 0)
        return {
            "exit_code": exit_code,
            "stdout": "",
            "stderr": self.stderr if exit_code else "",
            "duration_ms": 0,
            "started_at": now,
            "finished_at": now,
        }

    def names(self) -> list[str]:
        return [str(call["name"]) for call in self.calls]


def git(repo: Path, *args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args],
        cwd=str(repo),
        check=True,
        capture_output=True,
        text=True,
        env={**os.environ, **GIT_ENV},
    )


def current_branch(repo: Path) -> str:
    return git(repo, "rev-parse", "--abbrev-ref", "HEAD").stdout.strip()


def publish_calls(repo: Path) -> list[float]:
    log = repo.parent / "publish.log"
    if not log.exists():
        return []
    return [float(line) for line in log.read_text(encoding="utf-8").split()]


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def checkout(tmp_path: Path) -> Path:
    """Create a git repository with every branch in BRANCHES and a stub publish.sh.

    The publish log lives next to the repository so writing it never dirties
    the working tree.
    """
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")

    script = repo / "publish.sh"
    script.write_text(PUBLISH_SCRIPT.replace("{python}", sys.executable), encoding="utf-8")
    script.chmod(0o755)
    git(repo, "add", "publish.sh")
    git(repo, "-c", "commit.gpgsign=false", "commit", "-q", "-m", "Initial commit")

    for name in BRANCHES:
        if name != "main":
            git(repo, "branch", name)
    return repo


@pytest.fixture
def config(checkout: Path) -> Config:
    return Config(checkout_path=checkout, branches=BRANCHES)


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Start every test from a clean rotator environment."""
    for var in (
        "ROTATOR_CHECKOUT_PATH",
        "ROTATOR_BRANCHES",
        "ROTATOR_SWITCH_DELAY_MS",
        "ROTATOR_PUBLISH_COMMAND",
        "ROTATOR_GIT",
        "PUBLISH_EXIT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
