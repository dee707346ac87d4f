"""Command line entrypoint for Branch Rotator.

The command takes no options.  Configuration comes from the environment
(see ``branch_rotator.config``).  Status lines go to stdout and logs to
stderr.
"""

from __future__ import annotations

import logging
import signal
import sys
from collections.abc import Sequence

from .config import Config
from .constants import DEFAULT_LOG_LEVEL, EXIT_INTERRUPTED, LOG_FORMAT
from .errors import RotatorError
from .rotator import Rotator


def _raise_interrupt(signum: int, frame: object) -> None:
    raise KeyboardInterrupt(f"received signal {signum}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run one rotation and return the process exit status.

    Zero means both the checkout and the publish step succeeded.  Otherwise
    the status of the failing step is returned, 2 for configuration errors
    and 130 when interrupted.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=getattr(logging, DEFAULT_LOG_LEVEL, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    logger = logging.getLogger("branch_rotator")
    if args:
        logger.warning("Ignoring unrecognized arguments: %s", " ".join(args))

    try:
        config = Config.load_from_env()
    except RotatorError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    # SIGTERM aborts the sequence the same way Ctrl-C does
    previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        Rotator(config).run()
    except RotatorError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except KeyboardInterrupt:
        logger.error("Interrupted; remaining steps skipped")
        return EXIT_INTERRUPTED
    finally:
        # None means the previous handler was not installed from Python
        signal.signal(signal.SIGTERM, signal.SIG_DFL if previous is None else previous)
    return 0


if __name__ == "__main__":
    sys.exit(main())
