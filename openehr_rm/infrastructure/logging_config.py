"""Logging setup for command-line and batch use.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
function is for applications that want a root handler.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once.

    Parameters:
        level: Log level name; defaults to the configured ``log_level``
    """
    if level is None:
        from openehr_rm.infrastructure.settings import settings
        level = settings.log_level
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logging.getLogger(__name__).debug("Logging configured at %s", level.upper())
