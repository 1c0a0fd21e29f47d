"""
Logging for the invoice_builder package.

Streamlit owns the root logger, so only the package logger is configured here.
Calling configure_logging() again updates the level and leaves the handler alone.
"""
import logging
import sys

PACKAGE_LOGGER = "invoice_builder"
HANDLER_NAME = "invoice_builder.stderr"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    log = logging.getLogger(PACKAGE_LOGGER)
    log.setLevel(level)
    if not any(h.get_name() == HANDLER_NAME for h in log.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        log.addHandler(handler)
    logging.getLogger("reportlab").setLevel(logging.WARNING)
    return log
