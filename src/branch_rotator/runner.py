"""Command runners.

This module defines the runner abstraction used by the rotator to execute
git and the publish step.  ``LocalRunner`` runs commands as child processes
of the current interpreter.  Tests may supply any object implementing
``CommandRunner``.
"""

from __future__ import annotations

import errno
import logging
import os
import subprocess
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from .constants import EXIT_NOT_EXECUTABLE, EXIT_NOT_FOUND

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Interface for a command runner.

    Results of ``run`` must include exit_code, stdout, stderr, duration_ms,
    started_at and finished_at fields.
    """

    def run(
        self,
        argv: Sequence[str],
        cwd: Path,
        capture: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> dict[str, object]:
        ...


def normalize_returncode(returncode: int) -> int:
    """Map a child killed by signal N (returncode -N) to the shell's 128 + N."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class LocalRunner:
    """Runner that executes commands on the local machine.

    The child is waited on along every exit path.  If the parent is
    interrupted while waiting, the child is killed and reaped before the
    exception propagates.
    """

    def run(
        self,
        argv: Sequence[str],
        cwd: Path,
        capture: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> dict[str, object]:
        """Run ``argv`` in ``cwd`` and wait for it to finish.

        With ``capture`` false the child inherits stdout and stderr, so its
        output reaches the terminal as it is produced.  Failures to start the
        child are reported the way a shell reports them: exit code 127 when
        the executable is missing and 126 when it cannot be executed.
        """
        logger.debug("Running %s in %s", list(argv), cwd)
        started_at = time.time()
        start_ns = time.monotonic_ns()

        try:
            proc = subprocess.Popen(
                list(argv),
                cwd=str(cwd),
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
                shell=False,
                text=True,
                env={**os.environ, **env} if env else None,
            )
        except FileNotFoundError as exc:
            stdout = ""
            stderr = f"{argv[0]}: {exc.strerror or 'not found'}"
            exit_code = EXIT_NOT_FOUND
        except PermissionError as exc:
            stdout = ""
            stderr = f"{argv[0]}: {exc.strerror or 'permission denied'}"
            exit_code = EXIT_NOT_EXECUTABLE
        except OSError as exc:
            if exc.errno != errno.ENOEXEC:
                raise
            stdout = ""
            stderr = f"{argv[0]}: {exc.strerror or 'exec format error'}"
            exit_code = EXIT_NOT_EXECUTABLE
        else:
            with proc:
                try:
                    stdout, stderr = proc.communicate()
                except BaseException:
                    # Popen.__exit__ skips the final wait on KeyboardInterrupt
                    proc.kill()
                    proc.wait()
                    raise
            stdout = stdout or ""
            stderr = stderr or ""
            exit_code = normalize_returncode(proc.returncode)

        finished_at = time.time()
        duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)

        return {
            "exit_code": exit_code,
            "stdout": stdout,
            "stderr": stderr,
            "duration_ms": duration_ms,
            "started_at": started_at,
            "finished_at": finished_at,
        }
