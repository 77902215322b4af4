import itertools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Optional
    from typing import Union
    from typing import Type

    import sentry_core

    from sentry_core._types import (
        BackendFactory,
        BreadcrumbObserver,
        BreadcrumbPredicate,
        BreadcrumbProcessor,
        EventObserver,
        EventPredicate,
        EventProcessor,
    )


# Default maximum number of breadcrumbs kept on a scope and attached to an
# event. Can be overwritten with the `max_breadcrumbs` option.
DEFAULT_MAX_BREADCRUMBS = 100


class ClientConstructor:

    def __init__(
        self,
        dsn=None,  # type: Optional[str]
        *,
        enabled=True,  # type: bool
        max_breadcrumbs=DEFAULT_MAX_BREADCRUMBS,  # type: int
        release=None,  # type: Optional[str]
        environment=None,  # type: Optional[str]
        should_add_breadcrumb=None,  # type: Optional[BreadcrumbPredicate]
        before_breadcrumb=None,  # type: Optional[BreadcrumbProcessor]
        after_breadcrumb=None,  # type: Optional[BreadcrumbObserver]
        should_send=None,  # type: Optional[EventPredicate]
        before_send=None,  # type: Optional[EventProcessor]
        after_send=None,  # type: Optional[EventObserver]
        backend=None,  # type: Optional[Union[sentry_core.backend.Backend, Type[sentry_core.backend.Backend], BackendFactory]]
        debug=None,  # type: Optional[bool]
        http_proxy=None,  # type: Optional[str]
        https_proxy=None,  # type: Optional[str]
        ca_certs=None,  # type: Optional[str]
    ):
        # type: (...) -> None
        pass


def _get_default_options():
    # type: () -> dict
    import inspect

    a = inspect.getfullargspec(ClientConstructor.__init__)
    defaults = a.defaults or ()
    kwonlydefaults = a.kwonlydefaults or {}

    return dict(
        itertools.chain(
            zip(a.args[-len(defaults) :], defaults),
            kwonlydefaults.items(),
        )
    )


DEFAULT_OPTIONS = _get_default_options()
del _get_default_options


VERSION = "0.1.0"

SDK_INFO = {
    "name": "sentry.python.core",
    "version": VERSION,
}
