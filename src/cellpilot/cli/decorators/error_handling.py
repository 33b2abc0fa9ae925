"""Error handling decorator for CLI commands."""

from __future__ import annotations

import os
import signal
import sys
from functools import wraps

import click
import yaml

from cellpilot.cli.output import OutputFormatter
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)
out = OutputFormatter()

# Restore default SIGPIPE so `cellpilot analyze ... | head` exits quietly
if hasattr(signal, "SIGPIPE"):
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)

# Checked in order; the first matching type picks the message prefix
_ERROR_PREFIXES = (
    ((FileNotFoundError, NotADirectoryError), "File not found"),
    (PermissionError, "Permission denied"),
    (yaml.YAMLError, "Could not parse request file"),
    (ValueError, "Invalid value"),
    (KeyError, "Missing key"),
)


def handle_errors(f):
    """Turn exceptions raised by a command into one-line messages.

    Known error types are reported with a short prefix and their details
    logged at DEBUG; anything else is logged with a traceback. In every
    case the command ends with ``click.Abort`` (exit code 1).

    Example:
        @click.command()
        @handle_errors
        def analyze_cmd(data_dir):
            ...
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except click.Abort:
            raise
        except BrokenPipeError:
            sys.stdout = sys.stderr = open(os.devnull, "w")
            sys.exit(0)
        except Exception as e:
            for error_types, prefix in _ERROR_PREFIXES:
                if isinstance(e, error_types):
                    out.error(f"{prefix}: {e}")
                    logger.debug(f"{type(e).__name__} details", exc_info=True)
                    break
            else:
                out.error(f"Unexpected error: {e}")
                logger.exception("Unexpected error in command")
            raise click.Abort()

    return wrapper
