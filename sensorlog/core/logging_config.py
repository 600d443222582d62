from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging once per process."""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
    _configured = True
