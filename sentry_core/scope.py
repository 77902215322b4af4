from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import List, Optional

    from sentry_core._types import Breadcrumb, Context


class Scope:
    """Holds the breadcrumbs and context that are attached to events.

    A frontend creates one scope for itself, which is used whenever no scope
    is passed explicitly. Passing separate scopes (for instance one per
    request) keeps independent trails while sharing one frontend.

    `breadcrumbs` is never appended to in place. The breadcrumb recorder
    builds a new list and assigns it back once the backend accepted the
    breadcrumb, without awaiting in between. On a single event loop
    concurrent `add_breadcrumb` calls therefore keep all breadcrumbs, in
    the order the backend finished storing them rather than call order.
    Nothing guards a scope shared between threads or event loops.
    """

    __slots__ = ("breadcrumbs", "context")

    def __init__(self, breadcrumbs=None, context=None):
        # type: (Optional[List[Breadcrumb]], Optional[Context]) -> None
        self.breadcrumbs = list(breadcrumbs or ())  # type: List[Breadcrumb]
        self.context = dict(context or {})  # type: Context

    def __repr__(self):
        # type: () -> str
        return "<%s breadcrumbs=%d context=%s>" % (
            self.__class__.__name__,
            len(self.breadcrumbs),
            sorted(self.context),
        )
