"""structlog configuration for intl_runtime.

Production (empty ``PREFIX``) renders JSON lines, anything else renders for
the console. Under pytest nothing is emitted.

Usage:
    from intl_runtime.logging import get_module_logger

    logger = get_module_logger()
    logger.info("engine_created", locale="de")
"""

import inspect
import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger

from intl_runtime.configuration import Settings, get_settings

SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _processors(json_output: bool) -> List[structlog.typing.Processor]:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(
    settings: Optional[Settings] = None,
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog on top of stdlib logging.

    Args:
        settings: Source of LOG_LEVEL and production mode (default:
            ``get_settings()``).
        log_level: Overrides LOG_LEVEL.
        is_production: Overrides production mode (JSON vs console output).

    Returns:
        A logger using the new configuration.
    """
    testing = _is_test_environment()
    if testing:
        processors = [
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
        level = SILENT_LEVEL
        logging.root.setLevel(level)
    else:
        settings = settings or get_settings()
        json_output = settings.is_production if is_production is None else is_production
        processors = _processors(json_output)
        level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    # Host applications keep their own handlers; only tests reset them
    logging.basicConfig(format="%(message)s", level=level, force=testing)
    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Return a logger bound to the calling module.

    Binds ``component`` (last dotted segment) and ``module_path``, e.g.
    ``component="cache"``, ``module_path="intl_runtime.i18n.cache"``.
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module is None:
        return logger.bind(component="unknown")
    return logger.bind(component=module.__name__.rsplit(".", 1)[-1], module_path=module.__name__)
