"""Running the OS commands the collector reads from."""

import logging
import subprocess
from collections.abc import Callable

from macstat.errors import CommandError

logger = logging.getLogger(__name__)

# Takes an argv list, returns the command's stdout.
CommandRunner = Callable[[list[str]], str]


def run_command(argv: list[str]) -> str:
    """
    Run a command and return its standard output.

    Raises:
        CommandError: If the command cannot be started or exits nonzero.
    """
    logger.debug("running %s", " ".join(argv))
    try:
        result = subprocess.run(
            argv,
            check=True,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        # missing, not executable, or not a program at all
        raise CommandError(argv, None, str(e)) from e
    except subprocess.CalledProcessError as e:
        raise CommandError(argv, e.returncode, e.stderr or "") from e
    return result.stdout
