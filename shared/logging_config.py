"""Central logging configuration for programs that embed the codec.

The codec modules only create module-level loggers; nothing is configured on
import. Applications and the test-suite call :func:`ensure_codec_logging` to
route those records to a log file (and to an interactive stderr when there is
one).  Repeated calls do not register duplicate handlers.

Two environment variables allow customising where the log file is written:

``SMF_CODEC_LOG_FILE``
    Absolute path to the log file that should be created.

``SMF_CODEC_LOG_DIR``
    Directory where the default log file name will be created.  Ignored when
    ``SMF_CODEC_LOG_FILE`` is present.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

_LOG_FILE_ENV = "SMF_CODEC_LOG_FILE"
_LOG_DIR_ENV = "SMF_CODEC_LOG_DIR"
_DEFAULT_DIRNAME = ".smf_codec"
_DEFAULT_LOGNAME = "codec.log"
_CODEC_LOGGER = "smf_codec"
_CONFIGURED = False
_LOG_PATH: Path | None = None
_HANDLER_TAG = "_smf_codec_logging_handler"
_FILE_HANDLER: logging.FileHandler | None = None


class LogVerbosity(str, Enum):
    """Verbosity levels supported by the codec log file."""

    DISABLED = "disabled"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.DISABLED: logging.CRITICAL + 1,
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}

_DEFAULT_VERBOSITY = LogVerbosity.WARNING
_CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


def ensure_codec_logging() -> Path:
    """Attach the codec log handlers to the ``smf_codec`` logger.

    The first invocation installs a file handler (at the current verbosity)
    and a console handler (WARNING level, only when stderr is interactive).
    Subsequent calls are no-ops and return the already configured log file
    path.

    Returns
    -------
    Path
        Location of the log file that records codec diagnostics.
    """

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER

    if _CONFIGURED and _LOG_PATH is not None:
        return _LOG_PATH

    log_path = _resolve_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    codec_logger = logging.getLogger(_CODEC_LOGGER)
    codec_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(_VERBOSITY_LEVELS[_CURRENT_VERBOSITY])
    file_handler.setFormatter(formatter)
    setattr(file_handler, _HANDLER_TAG, True)
    codec_logger.addHandler(file_handler)
    _FILE_HANDLER = file_handler

    if _should_log_to_stderr(codec_logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.WARNING)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _HANDLER_TAG, True)
        codec_logger.addHandler(stream_handler)

    _CONFIGURED = True
    _LOG_PATH = log_path

    codec_logger.info(
        "Writing codec logs to %s (verbosity=%s)",
        log_path,
        _CURRENT_VERBOSITY.value,
    )
    return log_path


def set_file_log_verbosity(verbosity: LogVerbosity | str) -> None:
    """Adjust the minimum severity recorded in the codec log file."""

    global _CURRENT_VERBOSITY

    if isinstance(verbosity, str) and not isinstance(verbosity, LogVerbosity):
        try:
            verbosity = LogVerbosity(verbosity.lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    ensure_codec_logging()
    _CURRENT_VERBOSITY = verbosity
    if _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(_VERBOSITY_LEVELS[verbosity])
    logging.getLogger(_CODEC_LOGGER).info("File log verbosity set to %s", verbosity.value)


def get_file_log_verbosity() -> LogVerbosity:
    """Return the current verbosity level for the codec log file."""

    return _CURRENT_VERBOSITY


def _resolve_log_path() -> Path:
    env_file = os.environ.get(_LOG_FILE_ENV)
    if env_file:
        return Path(env_file).expanduser()

    env_dir = os.environ.get(_LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser() / _DEFAULT_LOGNAME

    return Path.home() / _DEFAULT_DIRNAME / "logs" / _DEFAULT_LOGNAME


def _should_log_to_stderr(handlers: Iterable[logging.Handler]) -> bool:
    stderr = getattr(sys, "stderr", None)
    is_tty = getattr(stderr, "isatty", None)
    if not callable(is_tty) or not is_tty():
        return False

    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is stderr:
            return False
    return True


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_codec_logging`."""

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _CURRENT_VERBOSITY

    codec_logger = logging.getLogger(_CODEC_LOGGER)
    for handler in list(codec_logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            codec_logger.removeHandler(handler)
            handler.close()

    _CONFIGURED = False
    _LOG_PATH = None
    _FILE_HANDLER = None
    _CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


__all__ = [
    "LogVerbosity",
    "ensure_codec_logging",
    "get_file_log_verbosity",
    "set_file_log_verbosity",
]
