from sentry_core.scope import Scope
from sentry_core.backend import Backend
from sentry_core.frontend import FrontendBase
from sentry_core.transport import HttpTransport
from sentry_core.client import Client
from sentry_core.status import SendStatus
from sentry_core.utils import BadDsn, Dsn

from sentry_core.api import *  # noqa

from sentry_core.consts import VERSION  # noqa

__all__ = [  # noqa
    "Scope",
    "Backend",
    "FrontendBase",
    "HttpTransport",
    "Client",
    "SendStatus",
    "BadDsn",
    "Dsn",
    # From sentry_core.api
    "init",
    "add_breadcrumb",
    "capture_event",
    "capture_exception",
    "capture_message",
    "get_client",
    "is_initialized",
    "set_context",
    "set_extra",
    "set_tag",
    "set_user",
]

# Initialize the debug support after everything is loaded
from sentry_core.debug import init_debug_support

init_debug_support()
del init_debug_support
