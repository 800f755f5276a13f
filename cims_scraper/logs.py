"""
Logging setup for the command line.

Console output keeps ANSI colors; the optional log file gets the same
messages with color codes stripped.
"""

import logging
import re

from .settings import Settings


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


def configure_logging(settings: Settings) -> None:
    """Configure root and scraper loggers from settings."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handlers = []
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(settings.log_format))
    handlers.append(console_handler)

    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
        file_handler.setFormatter(ColorStripFormatter(settings.log_format))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    # Scraper loggers get their own copies of the handlers and do not propagate,
    # so each message appears once
    scraper_logger = logging.getLogger('scraper')
    scraper_logger.propagate = False
    for handler in list(scraper_logger.handlers):
        scraper_logger.removeHandler(handler)
    for handler in handlers:
        scraper_logger.addHandler(handler)
    scraper_logger.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger('httpx').setLevel(max(level, logging.WARNING))
