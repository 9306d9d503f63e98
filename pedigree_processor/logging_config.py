"""
Logging setup for the pedigree processor.

Modules log through ``logging.getLogger(__name__)``; this only configures
the root logger at application startup.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a stream handler.

    Calling it again only updates the level; handlers installed by a host
    (uvicorn, pytest) are left in place.

    Args:
        level: Log level name (e.g. 'DEBUG', 'INFO')
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
