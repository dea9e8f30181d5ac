import logging
import os
import sys

LOG_FORMAT = '[%(levelname)s] %(name)s: %(message)s'

def configure_logging(level=None):
    """
    Send all log records to stderr so stdout stays pure JSON.
    Level comes from the argument, else DAILYINFO_LOG_LEVEL, else INFO.
    """
    if level is None:
        level = os.environ.get("DAILYINFO_LOG_LEVEL", "INFO").upper()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # requests retries and connection pool chatter
    logging.getLogger("urllib3").setLevel(logging.WARNING)
