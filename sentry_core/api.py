import sys

from sentry_core.client import Client
from sentry_core.status import SendStatus
from sentry_core.utils import logger

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, Dict, Optional

    from sentry_core._types import Breadcrumb, Context, Event
    from sentry_core.scope import Scope


# When changing this, update __all__ in __init__.py too
__all__ = [
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


_client = None  # type: Optional[Client]


def init(*args, **kwargs):
    # type: (*Optional[str], **Any) -> Client
    """Initializes the SDK and binds a process wide client.

    Takes the same arguments as `Client`. A previously bound client is
    closed. The new client is installed right away; when it is disabled
    (no DSN or `enabled=False`) installation is skipped.
    """
    global _client

    client = Client(*args, **kwargs)
    if _client is not None:
        _client.close()
    _client = client

    if not client.install():
        logger.debug("SDK is disabled or the backend did not install")

    return client


def get_client():
    # type: () -> Optional[Client]
    return _client


def is_initialized():
    # type: () -> bool
    """Whether a client is bound and able to send events."""
    return _client is not None and _client.is_enabled()


async def capture_event(event, scope=None):
    # type: (Event, Optional[Scope]) -> SendStatus
    if _client is None:
        return SendStatus.SKIPPED
    return await _client.capture_event(event, scope)


async def capture_message(message, scope=None):
    # type: (str, Optional[Scope]) -> SendStatus
    if _client is None:
        return SendStatus.SKIPPED
    return await _client.capture_message(message, scope)


async def capture_exception(error=None, scope=None):
    # type: (Optional[BaseException], Optional[Scope]) -> SendStatus
    """Captures an exception, by default the one currently being handled."""
    if _client is None:
        return SendStatus.SKIPPED
    if error is None:
        error = sys.exc_info()[1]
        if error is None:
            raise ValueError("No exception to capture")
    return await _client.capture_exception(error, scope)


async def add_breadcrumb(crumb=None, scope=None, **kwargs):
    # type: (Optional[Breadcrumb], Optional[Scope], **Any) -> None
    if _client is None:
        logger.info("Dropped breadcrumb because no client bound")
        return

    crumb = dict(crumb or ())
    crumb.update(kwargs)
    if not crumb:
        return

    await _client.add_breadcrumb(crumb, scope)


async def set_context(context, scope=None):
    # type: (Context, Optional[Scope]) -> None
    if _client is None:
        return
    await _client.set_context(context, scope)


async def set_extra(key, value, scope=None):
    # type: (str, Any, Optional[Scope]) -> None
    await set_context({"extra": {key: value}}, scope)


async def set_tag(key, value, scope=None):
    # type: (str, Any, Optional[Scope]) -> None
    await set_context({"tags": {key: value}}, scope)


async def set_user(value, scope=None):
    # type: (Dict[str, Any], Optional[Scope]) -> None
    """Merges ``value`` into the user on the scope.

    Keys already set on the user are kept unless ``value`` overrides them.
    """
    await set_context({"user": dict(value)}, scope)
