"""
Logging configuration for the exporter.

Console output only: a human readable, level-colored line per record on stderr.
"""
import logging
import sys
from datetime import datetime


class ReadableFormatter(logging.Formatter):
    """Human readable formatter for the console."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

        color = self.COLORS.get(record.levelname, '') if self.use_color else ''
        reset = self.RESET if color else ''

        formatted = f"{timestamp} {color}{record.levelname:8}{reset} [{record.name}] {record.getMessage()}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger for a CLI run.

    Args:
        verbose: Log DEBUG records (including tracebacks) instead of INFO
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ReadableFormatter(use_color=sys.stderr.isatty()))
    root_logger.addHandler(console_handler)

    # Driver noise
    logging.getLogger("mysql.connector").setLevel(logging.WARNING)
