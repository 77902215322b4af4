from types import MappingProxyType

from sentry_core.backend import make_backend
from sentry_core.consts import DEFAULT_MAX_BREADCRUMBS
from sentry_core.scope import Scope
from sentry_core.status import SendStatus
from sentry_core.utils import Dsn, logger, now

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, Dict, Mapping, Optional

    from sentry_core._types import Breadcrumb, Context, Event, SdkInfo
    from sentry_core.backend import Backend


CONTEXT_KEYS = ("extra", "tags", "user")


class FrontendBase:
    """Base implementation for all frontends.

    A frontend takes options and a backend. The backend option may be a
    backend instance, a backend subclass or a factory taking the options;
    see `sentry_core.backend.make_backend`.

    If a DSN is given in the options it is parsed right away and an invalid
    DSN raises `BadDsn`. Without a DSN the frontend is valid but disabled
    and will not send anything.

    Before an event is handed to the backend it passes through
    `prepare_event`, which adds SDK information, `release`,
    `environment`, breadcrumbs and context from the scope. Subclasses can
    override it to add more.

    Subclasses must implement `get_sdk_info`.
    """

    def __init__(self, options):
        # type: (Dict[str, Any]) -> None
        self._options = MappingProxyType(dict(options))  # type: Mapping[str, Any]

        self._dsn = None  # type: Optional[Dsn]
        if self._options.get("dsn"):
            self._dsn = Dsn(self._options["dsn"])

        self._backend = make_backend(dict(self._options))

        # Tri-state: None until install() reached the backend.
        self._installed = None  # type: Optional[bool]

        # The initial scope must have access to backend, options and DSN
        self._internal_scope = self.get_initial_scope()

    def get_sdk_info(self):
        # type: () -> SdkInfo
        """Returns the name and version of the SDK."""
        raise NotImplementedError()

    def get_initial_scope(self):
        # type: () -> Scope
        return Scope()

    def get_internal_scope(self):
        # type: () -> Scope
        """The scope used when none is passed to the public methods."""
        return self._internal_scope

    def get_backend(self):
        # type: () -> Backend
        return self._backend

    def get_dsn(self):
        # type: () -> Optional[Dsn]
        return self._dsn

    def get_options(self):
        # type: () -> Mapping[str, Any]
        return self._options

    @property
    def max_breadcrumbs(self):
        # type: () -> int
        max_breadcrumbs = self._options.get("max_breadcrumbs")
        if max_breadcrumbs is None:
            return DEFAULT_MAX_BREADCRUMBS
        return max_breadcrumbs

    def is_enabled(self):
        # type: () -> bool
        """Whether the SDK is enabled and a valid DSN is present."""
        return self._options.get("enabled") is not False and self._dsn is not None

    def install(self):
        # type: () -> bool
        if not self.is_enabled():
            logger.debug("Not installing, SDK is disabled")
            return False

        if self._installed is None:
            self._installed = bool(self._backend.install())
            logger.debug("Installed backend: %s", self._installed)

        return self._installed

    async def capture_exception(self, exception, scope=None):
        # type: (Any, Optional[Scope]) -> SendStatus
        event = await self._backend.event_from_exception(exception)
        return await self.capture_event(event, scope)

    async def capture_message(self, message, scope=None):
        # type: (str, Optional[Scope]) -> SendStatus
        event = await self._backend.event_from_message(message)
        return await self.capture_event(event, scope)

    async def capture_event(self, event, scope=None):
        # type: (Event, Optional[Scope]) -> SendStatus
        if scope is None:
            scope = self._internal_scope
        return await self.send_event(event, scope)

    async def add_breadcrumb(self, breadcrumb, scope=None):
        # type: (Breadcrumb, Optional[Scope]) -> None
        if scope is None:
            scope = self._internal_scope

        max_breadcrumbs = self.max_breadcrumbs
        if max_breadcrumbs == 0:
            return

        options = self._options
        crumb = {"timestamp": now()}  # type: Breadcrumb
        crumb.update(breadcrumb)

        should_add_breadcrumb = options.get("should_add_breadcrumb")
        if should_add_breadcrumb is not None and not should_add_breadcrumb(crumb):
            logger.info("should_add_breadcrumb dropped breadcrumb (%s)", crumb)
            return

        before_breadcrumb = options.get("before_breadcrumb")
        if before_breadcrumb is not None:
            crumb = before_breadcrumb(crumb)

        if await self._backend.store_breadcrumb(crumb, scope):
            # Reassigned rather than appended; see the note on `Scope`.
            scope.breadcrumbs = (scope.breadcrumbs + [crumb])[-max_breadcrumbs:]
        else:
            logger.debug("Backend did not store breadcrumb (%s)", crumb)

        after_breadcrumb = options.get("after_breadcrumb")
        if after_breadcrumb is not None:
            after_breadcrumb(crumb)

    async def set_context(self, context, scope=None):
        # type: (Context, Optional[Scope]) -> None
        if scope is None:
            scope = self._internal_scope

        if not await self._backend.store_context(context, scope):
            logger.debug("Backend did not store context (%s)", context)
            return

        current = scope.context
        for key in CONTEXT_KEYS:
            if context.get(key) is not None:
                current[key] = {**(current.get(key) or {}), **context[key]}

    def prepare_event(self, event, scope):
        # type: (Event, Scope) -> Event
        """Adds common information to events.

        The information includes `release` and `environment` from the
        options, SDK information from `get_sdk_info`, as well as breadcrumbs
        and context (extra, tags and user) from the scope.

        Information already present in the event is never overwritten. For
        the context groups, keys are merged with the event's keys winning.
        The given event is left untouched and a new one is returned.
        """
        options = self._options
        max_breadcrumbs = self.max_breadcrumbs

        prepared = {"sdk": self.get_sdk_info()}  # type: Event
        prepared.update(event)

        for key in "environment", "release":
            if prepared.get(key) is None and options.get(key) is not None:
                prepared[key] = options[key]

        breadcrumbs = scope.breadcrumbs
        if breadcrumbs and max_breadcrumbs > 0:
            prepared["breadcrumbs"] = breadcrumbs[-max_breadcrumbs:]

        context = scope.context
        for key in CONTEXT_KEYS:
            if context.get(key) is not None:
                prepared[key] = {**context[key], **(event.get(key) or {})}

        return prepared

    async def send_event(self, event, scope):
        # type: (Event, Scope) -> SendStatus
        """Sends an event through the backend.

        Returns `SendStatus.SKIPPED` when the SDK is disabled or
        `should_send` rejected the event. Otherwise the status is derived
        from the code returned by the backend. A rate limited event is
        reported as `SendStatus.RATE_LIMIT` and not retried.
        """
        if not self.is_enabled():
            logger.debug("Skipped event, SDK is disabled")
            return SendStatus.SKIPPED

        options = self._options
        prepared = self.prepare_event(event, scope)

        should_send = options.get("should_send")
        if should_send is not None and not should_send(prepared):
            logger.info("should_send dropped event (%s)", prepared)
            return SendStatus.SKIPPED

        before_send = options.get("before_send")
        final_event = before_send(prepared) if before_send is not None else prepared

        code = await self._backend.send_event(final_event)
        status = SendStatus.from_http_code(code)

        if status == SendStatus.RATE_LIMIT:
            # TODO: honor rate limits with a backoff queue in concrete SDKs;
            # until then the event is dropped and the status reported.
            logger.debug("Rate limit reached, event was dropped")

        after_send = options.get("after_send")
        if after_send is not None:
            after_send(final_event, status)

        return status
