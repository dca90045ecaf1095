# utils/logging_setup.py
import logging
import os
import sys
from typing import Optional


def setup_logging(level: Optional[str] = None) -> None:
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    fmt = '%(asctime)s level=%(levelname)s name=%(name)s msg="%(message)s"'
    logging.basicConfig(level=level, format=fmt, stream=sys.stdout)
    # pinecone's http layer is chatty at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
