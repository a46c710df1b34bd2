import logging
import sys

from nexus_api.config import LOG_LEVEL


_configured = False


def setup_logger(level: str | None = None) -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel((level or LOG_LEVEL).upper())
    _configured = True
