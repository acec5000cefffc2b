"""
Configuration settings for the data grid renderer.

Settings are read from environment variables prefixed with ``DATAGRID_``
and from a ``.env`` file in the working directory.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ENV_PREFIX = "DATAGRID_"

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class RendererSettings(BaseSettings):
    """Renderer configuration loaded from environment variables."""

    # Output formats (translated at render time)
    footer_format: str = Field(default="%operations% | %paginator% | %info%",
                               description="Footer cell template with %operations%, %paginator% and %info%")
    info_format: str = Field(default="Displaying items %from% - %to% of %count%",
                             description="Info template with %from%, %to% and %count%")
    page_format: str = Field(default="%label% %input% of %count%",
                             description="Paginator page input template with %label%, %input% and %count%")
    ajax_class: str = Field(default="datagrid-ajax", description="Class added to every generated link")
    indent_body: bool = Field(default=True, description="Serialize the grid body with indentation")

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    log_format: str = Field(default=DEFAULT_LOG_FORMAT, description="Logging format string")
    log_to_file: bool = Field(default=False, description="Enable logging to file with rotation")
    log_file_path: str = Field(default="logs/datagrid.log", description="Path to the log file (directory will be created)")
    log_max_bytes: int = Field(default=500000, description="Maximum size of a log file before rotation")
    log_max_files: int = Field(default=5, description="Maximum number of log files to keep")

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_prefix=ENV_PREFIX,
        extra='ignore',
        case_sensitive=False
    )


def load_settings(env_file: Optional[str] = '.env') -> RendererSettings:
    """
    Load renderer settings from the environment and an optional .env file.

    Raises:
        ValueError: If the settings cannot be built
    """
    if env_file:
        loaded = load_dotenv(env_file, override=False)
        logger.debug(f".env loading from '{env_file}': {loaded}")

    try:
        settings = RendererSettings(_env_file=env_file)
    except Exception as e:
        logger.exception(f"Critical error loading renderer configuration: {e}")
        raise ValueError(f"Failed to load configuration: {e}") from e

    logger.debug(f"Renderer configuration loaded (ajax_class={settings.ajax_class!r}, indent_body={settings.indent_body})")
    return settings


def configure_logging(log_level: str = "INFO", log_format: str = DEFAULT_LOG_FORMAT,
                      log_to_file: bool = False, log_file_path: str = "logs/datagrid.log",
                      max_bytes: int = 500000, max_log_files: int = 5) -> None:
    """
    Configure root logging with a console handler and optional rotating file.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log message format string
        log_to_file: Whether to also log to a rotating file
        log_file_path: Path to the log file (directory will be created if needed)
        max_bytes: Maximum size of one log file before rotation
        max_log_files: Maximum number of log files to keep
    """
    numeric_level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(numeric_level, int):
        logging.basicConfig(level=logging.INFO, format=log_format, force=True)
        logger.error(f"Invalid log level: {log_level}. Using INFO instead.")
        return

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_to_file:
        from logging.handlers import RotatingFileHandler

        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_file_path,
            maxBytes=max_bytes,
            backupCount=max(0, max_log_files - 1),  # current file + backups = total
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(numeric_level)
    logger.info(f"Logging configured: level={str(log_level).upper()}, file={'on' if log_to_file else 'off'}")


def configure_logging_from_settings(settings: RendererSettings) -> None:
    """Configure logging from the log_* fields of renderer settings."""
    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_to_file=settings.log_to_file,
        log_file_path=settings.log_file_path,
        max_bytes=settings.log_max_bytes,
        max_log_files=settings.log_max_files,
    )
