"""
Logging utilities for the session API and the renewal worker.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the shared storefront format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # httpx logs every request line at INFO, including query strings.
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
