import logging
import sys
from typing import Optional

from motiva_backend.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging(level: Optional[str] = None) -> None:
    """Initialise root logging once for the server and the CLI."""

    root_logger = logging.getLogger()
    if root_logger.handlers:
        # uvicorn or pytest already installed handlers
        return

    level_name = level or settings.LOG_LEVEL
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))
    root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
