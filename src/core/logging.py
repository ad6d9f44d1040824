import logging
import sys

from src.core.config import get_settings

_HANDLER_NAME = "calc-engine-stdout"


def setup_logging(level: str | int | None = None) -> None:
    """Configure logging to output to stdout with proper formatting.

    Without an explicit ``level`` the ``CALC_ENGINE_LOG_LEVEL`` setting is used.
    """
    if level is None:
        level = get_settings().log_level

    root_logger = logging.getLogger()

    # Repeated calls must not stack handlers
    if not any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
