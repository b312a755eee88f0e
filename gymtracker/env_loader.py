"""Load configuration from the environment.

For local use, a .env file is loaded first (GYMTRACKER_ENV_FILE overrides the
path). Values already present in the environment win over the file.
"""

import logging
import os
import zoneinfo
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATA_DIR = Path("~/.gymtracker")

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s - %(filename)s:%(lineno)d"
)


def load_environment() -> None:
    """Load variables from the .env file, if there is one."""
    env_file = os.getenv("GYMTRACKER_ENV_FILE", ".env")
    load_dotenv(env_file)


def get_data_dir() -> Path:
    """Get the directory that holds persisted sessions."""
    return Path(os.getenv("GYMTRACKER_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser()


def get_user_timezone() -> str | None:
    """Get the IANA timezone used for calendar dates, or None for machine local time.

    Raises:
        ValueError: If the configured timezone doesn't exist.
    """
    tz_name = os.getenv("GYMTRACKER_TIMEZONE")
    if not tz_name:
        return None
    try:
        zoneinfo.ZoneInfo(tz_name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Invalid GYMTRACKER_TIMEZONE value: {tz_name}") from e
    return tz_name


def configure_logging() -> None:
    """Configure basic logging, plus the gymtracker logger level from LOG_LEVEL."""
    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if "LOG_LEVEL" in os.environ:
        match os.environ["LOG_LEVEL"].upper():
            case "DEBUG":
                log_level = logging.DEBUG
            case "INFO":
                log_level = logging.INFO
            case "WARNING":
                log_level = logging.WARNING
            case "ERROR":
                log_level = logging.ERROR
            case "CRITICAL":
                log_level = logging.CRITICAL
            case _:
                raise ValueError(f"Invalid log level: {os.environ['LOG_LEVEL']}")
        logging.getLogger("gymtracker").setLevel(log_level)
