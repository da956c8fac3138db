import logging
from typing import Optional

from match_insights.config import LOG_FORMAT, LOG_LEVEL
from match_insights.utils.time_utils import get_current_time


# Custom logging implementation to use the application timezone
class AppTimeFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        ct = get_current_time()
        if datefmt:
            s = ct.strftime(datefmt)
        else:
            t = ct.strftime("%Y-%m-%d %H:%M:%S")
            s = "%s,%03d" % (t, record.msecs)
        return s


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Install a single stream handler on the root logger."""
    formatter = AppTimeFormatter(LOG_FORMAT)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    root_logger.setLevel((level or LOG_LEVEL).upper())
    root_logger.handlers = [handler]
    return root_logger
