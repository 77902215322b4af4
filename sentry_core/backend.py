from typing import TYPE_CHECKING

from sentry_core.utils import event_from_exception, logger

if TYPE_CHECKING:
    from typing import Any, Dict, Optional, Type

    from sentry_core._types import Breadcrumb, Context, Event
    from sentry_core.scope import Scope


class Backend:
    """Baseclass for all backends.

    A backend does everything that touches the platform: it turns exceptions
    and messages into events, persists breadcrumbs and context, and delivers
    events. The frontend only decides what to send and when.

    Every method but `install` is a coroutine. Errors raised here are not
    handled by the frontend and surface to whoever awaited the call.
    """

    def __init__(
        self, options=None  # type: Optional[Dict[str, Any]]
    ):
        # type: (...) -> None
        self.options = options

    def install(self):
        # type: () -> bool
        """Performs one-time setup. Returns whether the backend is ready."""
        raise NotImplementedError()

    async def event_from_exception(
        self, exception  # type: Any
    ):
        # type: (...) -> Event
        """Builds an event from an exception value."""
        raise NotImplementedError()

    async def event_from_message(
        self, message  # type: str
    ):
        # type: (...) -> Event
        """Builds an event from a plain message."""
        raise NotImplementedError()

    async def send_event(
        self, event  # type: Event
    ):
        # type: (...) -> Optional[int]
        """Delivers an event and returns the response status code."""
        raise NotImplementedError()

    async def store_breadcrumb(
        self,
        breadcrumb,  # type: Breadcrumb
        scope,  # type: Scope
    ):
        # type: (...) -> bool
        """Persists a breadcrumb. Returning `False` keeps it off the scope."""
        raise NotImplementedError()

    async def store_context(
        self,
        context,  # type: Context
        scope,  # type: Scope
    ):
        # type: (...) -> bool
        """Persists a context update. Returning `False` keeps it off the scope."""
        raise NotImplementedError()

    def kill(self):
        # type: () -> None
        """Releases whatever the backend holds on to."""
        pass


class NoopBackend(Backend):
    """Used when no DSN is configured. Accepts scope data, sends nothing."""

    def install(self):
        # type: () -> bool
        return False

    async def event_from_exception(self, exception):
        # type: (Any) -> Event
        return event_from_exception(exception)

    async def event_from_message(self, message):
        # type: (str) -> Event
        return {"message": message, "level": "info"}

    async def send_event(self, event):
        # type: (Event) -> Optional[int]
        logger.debug("Discarded event, no DSN configured")
        return None

    async def store_breadcrumb(self, breadcrumb, scope):
        # type: (Breadcrumb, Scope) -> bool
        return True

    async def store_context(self, context, scope):
        # type: (Context, Scope) -> bool
        return True


def make_backend(options):
    # type: (Dict[str, Any]) -> Backend
    ref_backend = options.get("backend")

    # If no backend is given, we use the http transport class
    if ref_backend is None:
        if not options.get("dsn"):
            return NoopBackend(options)

        from sentry_core.transport import HttpTransport

        backend_cls = HttpTransport  # type: Type[Backend]
    elif isinstance(ref_backend, Backend):
        return ref_backend
    elif isinstance(ref_backend, type) and issubclass(ref_backend, Backend):
        backend_cls = ref_backend
    elif callable(ref_backend):
        backend = ref_backend(options)
        if not isinstance(backend, Backend):
            raise TypeError(
                "Backend factory returned %r, expected a Backend instance"
                % (backend,)
            )
        return backend
    else:
        raise TypeError("Invalid backend %r" % (ref_backend,))

    return backend_cls(options)
