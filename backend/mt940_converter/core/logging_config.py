import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO/DEBUG
NOISY_LOGGERS = ("multipart", "python_multipart", "uvicorn.access")


def setup_logging(level: str = "INFO", parser_level: Optional[str] = None):
    """
    Centralized logging for the MT940 converter.
    It can be called multiple times without being duplicated.

    parser_level lets the per-line parse warnings (mt940_converter.utils.*)
    be silenced or turned up to DEBUG independently of the API logs.
    """
    root_logger = logging.getLogger()

    if root_logger.handlers:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    root_logger.addHandler(console_handler)

    if parser_level:
        parser_numeric = getattr(logging, parser_level.upper(), numeric_level)
        logging.getLogger("mt940_converter.utils").setLevel(parser_numeric)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
