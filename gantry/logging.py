"""femtologging helpers shared by the pipeline, runners, and CLI.

Every Gantry module logs through these helpers so that messages are formatted
before they reach femtologging and levels are spelled consistently.

Example:
>>> from gantry.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Dispatching %s for build %s", "push", "01abc")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger

DEFAULT_LOG_LEVEL = "INFO"


class LogLevel(enum.StrEnum):
    """Log levels accepted by ``--log-level`` and ``GANTRY_LOG_LEVEL``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return the upper-cased level and whether the input had to be replaced.

    Parameters
    ----------
    level : str | None
        Raw level name, usually taken from the command line or environment.

    Returns
    -------
    tuple[str, bool]
        The level to use and ``True`` when ``level`` was missing or unknown
        and :data:`DEFAULT_LOG_LEVEL` was substituted.

    """
    if not level:
        return (DEFAULT_LOG_LEVEL, True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)

    return (DEFAULT_LOG_LEVEL, True)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Install the femtologging root handler at the requested level.

    Parameters
    ----------
    level : str | None
        Raw level name; unknown values fall back to ``INFO``.
    force : bool, optional
        Replace an existing handler configuration.

    Returns
    -------
    tuple[str, bool]
        Same as :func:`normalize_log_level`, so callers can warn about a
        rejected level once logging is live.

    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


class _SupportsLog(typ.Protocol):
    """The subset of the femtologging logger API the helpers rely on."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _SupportsLog,
    level: str,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    message = template % args if args else template
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_debug(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a DEBUG message with percent-style formatting."""
    _emit(logger, "DEBUG", template, args, exc_info)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the record.

    """
    _emit(logger, "INFO", template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting."""
    _emit(logger, "WARNING", template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting."""
    _emit(logger, "ERROR", template, args, exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log ``message`` at ERROR with ``exc`` attached as exc_info.

    ``message`` is emitted verbatim; it is not treated as a template.
    """
    logger.log("ERROR", message, exc_info=exc, stack_info=False)


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
