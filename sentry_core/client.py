import os
from contextvars import ContextVar

from sentry_core.consts import DEFAULT_OPTIONS, SDK_INFO, ClientConstructor
from sentry_core.frontend import FrontendBase
from sentry_core.utils import logger

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, Dict, Optional

    from sentry_core._types import SdkInfo


_client_init_debug = ContextVar("client_init_debug")


def _get_options(*args, **kwargs):
    # type: (*Optional[str], **Any) -> Dict[str, Any]
    if args and (isinstance(args[0], (bytes, str)) or args[0] is None):
        dsn = args[0]  # type: Optional[str]
        args = args[1:]
    else:
        dsn = None

    if len(args) > 1:
        raise TypeError("Only single positional argument is expected")

    rv = dict(DEFAULT_OPTIONS)
    options = dict(*args, **kwargs)
    if dsn is not None and options.get("dsn") is None:
        options["dsn"] = dsn

    for key, value in options.items():
        if key not in rv:
            raise TypeError("Unknown option %r" % (key,))
        rv[key] = value

    if rv["dsn"] is None:
        rv["dsn"] = os.environ.get("SENTRY_DSN")

    if rv["release"] is None:
        rv["release"] = os.environ.get("SENTRY_RELEASE")

    if rv["environment"] is None:
        rv["environment"] = os.environ.get("SENTRY_ENVIRONMENT")

    max_breadcrumbs = rv["max_breadcrumbs"]
    if (
        isinstance(max_breadcrumbs, bool)
        or not isinstance(max_breadcrumbs, int)
        or max_breadcrumbs < 0
    ):
        raise ValueError(
            "Invalid value for max_breadcrumbs. Must be a non-negative int, got %r"
            % (max_breadcrumbs,)
        )

    return rv


class _Client(FrontendBase):
    """The client is the frontend for standalone use. It takes the client
    options as keyword arguments and optionally the DSN as first argument.
    """

    def __init__(self, *args, **kwargs):
        # type: (*Optional[str], **Any) -> None
        old_debug = _client_init_debug.get(False)
        try:
            options = get_options(*args, **kwargs)
            _client_init_debug.set(options["debug"])
            FrontendBase.__init__(self, options)
        finally:
            _client_init_debug.set(old_debug)

    def get_sdk_info(self):
        # type: () -> SdkInfo
        return dict(SDK_INFO)

    @property
    def dsn(self):
        # type: () -> Optional[str]
        """Returns the configured DSN as string."""
        return self.get_options()["dsn"]

    def close(self):
        # type: () -> None
        """Shuts down the backend."""
        logger.debug("Closing client")
        self.get_backend().kill()

    def __enter__(self):
        # type: () -> _Client
        return self

    def __exit__(self, exc_type, exc_value, tb):
        # type: (Any, Any, Any) -> None
        self.close()


if TYPE_CHECKING:
    # Make mypy, PyCharm and other static analyzers think `get_options` is a
    # type to have nicer autocompletion for params.
    #
    # Use `ClientConstructor` to define the argument types of `init` and
    # `Dict[str, Any]` to tell static analyzers about the return type.

    class get_options(ClientConstructor, Dict[str, Any]):  # noqa: N801
        pass

    class Client(ClientConstructor, _Client):
        pass

else:
    # Alias `get_options` for actual usage. Go through the lambda indirection
    # to throw PyCharm off of the weakly typed signature (it would otherwise
    # discover both the weakly typed signature of `_init` and our faked `init`
    # type).

    get_options = (lambda: _get_options)()
    Client = (lambda: _Client)()
