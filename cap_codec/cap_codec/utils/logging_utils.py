import logging
import sys
from typing import Optional, Union

from ..exceptions import ConfigurationError

PACKAGE_LOGGER_NAME = "cap_codec"

LevelLike = Union[int, str]


def resolve_level(level: LevelLike) -> int:
    """Turn ``"debug"``/``"INFO"``/``10`` into a logging level number."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")
    return resolved


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def configure_split_stream_logging(
    *,
    level: LevelLike = logging.INFO,
    stderr_level: LevelLike = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> logging.Logger:
    """Attach split stdout/stderr handlers to the codec's package logger.

    - DEBUG/INFO go to stdout
    - WARNING/ERROR/CRITICAL go to stderr

    Nothing in the library calls this on import; applications opt in, usually
    through :meth:`cap_codec.config.CodecConfig.set_logging`.
    """
    level = resolve_level(level)
    stderr_level = max(resolve_level(stderr_level), logging.DEBUG)

    target = logging.getLogger(logger_name)
    target.handlers.clear()
    target.setLevel(level)
    target.propagate = False

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_MaxLevelFilter(stderr_level - 1))
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(formatter)

    target.addHandler(stdout_handler)
    target.addHandler(stderr_handler)
    return target
