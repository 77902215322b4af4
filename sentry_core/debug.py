import sys
import logging

from sentry_core import api
from sentry_core.client import _client_init_debug
from sentry_core.utils import logger
from logging import LogRecord


class _ClientBasedFilter(logging.Filter):
    def filter(self, record):
        # type: (LogRecord) -> bool
        if _client_init_debug.get(False):
            return True

        client = api.get_client()
        return client is not None and bool(client.get_options()["debug"])


def init_debug_support():
    # type: () -> None
    if not logger.handlers:
        configure_logger()


def configure_logger():
    # type: () -> None
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(" [sentry] %(levelname)s: %(message)s"))
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG)
    logger.addFilter(_ClientBasedFilter())
