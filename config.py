import os
import logging.config
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Default to a local SQLite file next to the app
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///expenses.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
        },
    },
    "root": {
        "handlers": ["default"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        # SQL_ECHO already prints statements; keep the engine logger quiet otherwise
        "sqlalchemy.engine": {"level": "WARNING"},
    },
}


def configure_logging(level: str | None = None):
    """Route all logging through Rich. Safe to call on every Streamlit rerun."""
    config = dict(LOGGING_CONFIG)
    if level:
        config["root"] = {**LOGGING_CONFIG["root"], "level": level.upper()}
    logging.config.dictConfig(config)
