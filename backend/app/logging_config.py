"""
Logging configuration for the application.

Supports per-module log levels via environment variables:
- LOG_LEVEL: Global log level (default: INFO)
- LOG_FORMAT: Log format - simple or structured (default: structured)
- LOG_LEVEL_<MODULE>: Per-module override (e.g., LOG_LEVEL_PIPELINE=DEBUG)
"""

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.config import Settings


# Module name mapping: settings field suffix -> logger name
MODULE_LOGGERS = {
    "pipeline": "app.services.pipeline",
    "storage": "app.services.storage",
    "processes": "app.services.process_runner",
}

# Asset handled by the current task; copied into threads by asyncio.to_thread
asset_context: ContextVar[str | None] = ContextVar("asset_id", default=None)


class AssetContextFilter(logging.Filter):
    """Attach the current asset id to each record as record.asset_id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.asset_id = asset_context.get()
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured log formatter for easy parsing.

    Format: timestamp | level | logger | [asset_id] message

    The asset prefix appears only for records logged during a pipeline run.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record in structured format."""
        logger_name = record.name
        if logger_name.startswith("app.services."):
            logger_name = logger_name.replace("app.services.", "")
        elif logger_name.startswith("app.api."):
            logger_name = logger_name.replace("app.api.", "api.")
        elif logger_name.startswith("app."):
            logger_name = logger_name.replace("app.", "")

        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        asset_id = getattr(record, "asset_id", None)
        prefix = f"[{asset_id}] " if asset_id else ""

        message = (
            f"{timestamp} | "
            f"{record.levelname:8} | "
            f"{logger_name:15} | "
            f"{prefix}{record.getMessage()}"
        )

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(settings: "Settings") -> None:
    """
    Configure logging based on settings.

    Args:
        settings: Application settings with log configuration
    """
    root_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "structured":
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(root_level)
    handler.addFilter(AssetContextFilter())
    root_logger.addHandler(handler)

    _configure_module_loggers(settings, root_level)

    # Quiet noisy third-party loggers
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("s3transfer").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _configure_module_loggers(settings: "Settings", default_level: int) -> None:
    """
    Configure individual module log levels.

    Args:
        settings: Application settings
        default_level: Default log level to use
    """
    for module_key, logger_name in MODULE_LOGGERS.items():
        level_str = getattr(settings, f"log_level_{module_key}", None)

        if level_str:
            level = getattr(logging, level_str.upper(), default_level)
            logging.getLogger(logger_name).setLevel(level)
