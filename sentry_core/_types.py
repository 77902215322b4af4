from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Callable
    from typing import Dict

    import sentry_core

    Event = Dict[str, Any]
    Breadcrumb = Dict[str, Any]
    Context = Dict[str, Dict[str, Any]]
    SdkInfo = Dict[str, Any]

    BreadcrumbPredicate = Callable[[Breadcrumb], bool]
    BreadcrumbProcessor = Callable[[Breadcrumb], Breadcrumb]
    BreadcrumbObserver = Callable[[Breadcrumb], None]
    EventPredicate = Callable[[Event], bool]
    EventProcessor = Callable[[Event], Event]
    EventObserver = Callable[[Event, "sentry_core.status.SendStatus"], None]

    BackendFactory = Callable[[Dict[str, Any]], "sentry_core.backend.Backend"]
