"""
Logging setup: plain text records to stdout.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    # Existing root handlers are kept
    logging.basicConfig(format=_FORMAT, stream=sys.stdout)
    logging.getLogger().setLevel(level.upper())
