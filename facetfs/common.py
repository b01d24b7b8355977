"""
The common module is our ugly grab bag of common toys: the version, the error hierarchy shared by
every other module, and logging setup.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import appdirs

with (Path(__file__).parent / ".version").open("r") as fp:
    VERSION = fp.read().strip()


class FacetError(Exception):
    pass


class FacetExpectedError(FacetError):
    """These errors are printed without traceback."""

    pass


class InvalidAttributeTypeError(FacetExpectedError, TypeError):
    pass


class CreationRestrictedError(FacetExpectedError):
    """Raised when a creation-restricted attribute is supplied while the node is being created."""

    pass


class UnsettableAttributeError(FacetExpectedError):
    pass


class UnsupportedViewError(FacetExpectedError):
    pass


class NodeDoesNotExistError(FacetExpectedError, FileNotFoundError):
    pass


def type_name(x: object) -> str:
    """Render the type of a value for error messages."""
    return type(x).__name__


__logging_initialized: set[str | None] = set()


def initialize_logging(logger_name: str | None = None) -> None:
    if logger_name in __logging_initialized:
        return
    __logging_initialized.add(logger_name)

    logger = logging.getLogger(logger_name)

    # Useful for debugging dispatch problems from inside the test suite, since pytest captures our
    # debug logging output otherwise.
    log_despite_testing = os.environ.get("LOG_TEST", False)

    # Add a logging handler for stdout unless we are testing. Pytest captures logging output on its
    # own, so by default, we do not attach our own.
    if "pytest" not in sys.modules or log_despite_testing:  # pragma: no cover
        logger.setLevel(logging.INFO)
        # appdirs by default has Unix log to $XDG_CACHE_HOME, but I'd rather write logs to
        # $XDG_STATE_HOME.
        log_home = Path(appdirs.user_state_dir("facetfs"))
        if appdirs.system == "darwin":
            log_home = Path(appdirs.user_log_dir("facetfs"))
        log_home.mkdir(parents=True, exist_ok=True)
        log_file = log_home / "facetfs.log"

        simple_formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        verbose_formatter = logging.Formatter(
            "[ts=%(asctime)s.%(msecs)03d] [pid=%(process)d] [src=%(name)s:%(lineno)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(
            simple_formatter if not log_despite_testing else verbose_formatter
        )
        logger.addHandler(stream_handler)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=20 * 1024 * 1024,
            backupCount=10,
        )
        file_handler.setFormatter(verbose_formatter)
        logger.addHandler(file_handler)
