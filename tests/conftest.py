import pytest

import sentry_core
from sentry_core import api
from sentry_core.backend import Backend


VALID_DSN = "https://public@sentry.example.com/42"


class RecordingBackend(Backend):
    """Keeps everything the frontend hands over in memory."""

    def __init__(
        self,
        options=None,
        status_code=200,
        install_result=True,
        accept_breadcrumbs=True,
        accept_context=True,
    ):
        Backend.__init__(self, options)
        self.status_code = status_code
        self.install_result = install_result
        self.accept_breadcrumbs = accept_breadcrumbs
        self.accept_context = accept_context

        self.install_calls = 0
        self.events = []
        self.stored_breadcrumbs = []
        self.stored_contexts = []
        self.killed = False

    def install(self):
        self.install_calls += 1
        return self.install_result

    async def event_from_exception(self, exception):
        return {
            "level": "error",
            "exception": {
                "values": [
                    {"type": type(exception).__name__, "value": str(exception)}
                ]
            },
        }

    async def event_from_message(self, message):
        return {"message": message, "level": "info"}

    async def send_event(self, event):
        self.events.append(event)
        return self.status_code

    async def store_breadcrumb(self, breadcrumb, scope):
        self.stored_breadcrumbs.append((breadcrumb, scope))
        return self.accept_breadcrumbs

    async def store_context(self, context, scope):
        self.stored_contexts.append((context, scope))
        return self.accept_context

    def kill(self):
        self.killed = True


@pytest.fixture(autouse=True)
def clean_environ(monkeypatch):
    for name in "SENTRY_DSN", "SENTRY_RELEASE", "SENTRY_ENVIRONMENT":
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def unbind_client():
    """
    Resets the process wide client for every test to avoid leaking state
    between tests.
    """
    api._client = None
    yield
    api._client = None


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def make_client(backend):
    def inner(*args, **kwargs):
        kwargs.setdefault("backend", backend)
        return sentry_core.Client(*args, **kwargs)

    return inner


@pytest.fixture
def sentry_init(backend):
    def inner(*args, **kwargs):
        kwargs.setdefault("backend", backend)
        return sentry_core.init(*args, **kwargs)

    return inner
