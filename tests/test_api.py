import pytest

import sentry_core
from sentry_core import SendStatus
from sentry_core.scope import Scope

from tests.conftest import VALID_DSN


def test_not_initialized():
    assert sentry_core.get_client() is None
    assert not sentry_core.is_initialized()


def test_init_binds_and_installs(sentry_init, backend):
    client = sentry_init(VALID_DSN)
    assert sentry_core.get_client() is client
    assert sentry_core.is_initialized()
    assert backend.install_calls == 1


def test_init_without_dsn(sentry_init, backend):
    client = sentry_init()
    assert sentry_core.get_client() is client
    assert not sentry_core.is_initialized()
    assert backend.install_calls == 0


def test_init_closes_previous_client(sentry_init, backend):
    sentry_init(VALID_DSN)
    sentry_init(VALID_DSN)
    assert backend.killed


@pytest.mark.asyncio
async def test_calls_without_client():
    assert await sentry_core.capture_message("hi") == SendStatus.SKIPPED
    assert await sentry_core.capture_event({}) == SendStatus.SKIPPED
    assert await sentry_core.capture_exception(ValueError()) == SendStatus.SKIPPED
    await sentry_core.add_breadcrumb(message="hi")
    await sentry_core.set_tag("a", "b")


@pytest.mark.asyncio
async def test_capture_message(sentry_init, backend):
    sentry_init(VALID_DSN, environment="test")
    assert await sentry_core.capture_message("hi") == SendStatus.SUCCESS
    (event,) = backend.events
    assert event["message"] == "hi"
    assert event["environment"] == "test"


@pytest.mark.asyncio
async def test_capture_current_exception(sentry_init, backend):
    sentry_init(VALID_DSN)
    try:
        raise KeyError("missing")
    except KeyError:
        await sentry_core.capture_exception()

    (event,) = backend.events
    assert event["exception"]["values"][0]["type"] == "KeyError"


@pytest.mark.asyncio
async def test_capture_exception_requires_exception(sentry_init):
    sentry_init(VALID_DSN)
    with pytest.raises(ValueError):
        await sentry_core.capture_exception()


@pytest.mark.asyncio
async def test_add_breadcrumb_kwargs(sentry_init):
    client = sentry_init(VALID_DSN)
    await sentry_core.add_breadcrumb({"message": "hi"}, category="auth", level="info")

    (crumb,) = client.get_internal_scope().breadcrumbs
    assert crumb["message"] == "hi"
    assert crumb["category"] == "auth"
    assert crumb["level"] == "info"


@pytest.mark.asyncio
async def test_empty_breadcrumb_is_ignored(sentry_init, backend):
    sentry_init(VALID_DSN)
    await sentry_core.add_breadcrumb()
    assert backend.stored_breadcrumbs == []


@pytest.mark.asyncio
async def test_context_helpers(sentry_init, backend):
    client = sentry_init(VALID_DSN)
    await sentry_core.set_tag("region", "eu")
    await sentry_core.set_extra("attempt", 3)
    await sentry_core.set_user({"id": "42"})
    await sentry_core.set_context({"tags": {"team": "core"}})

    assert client.get_internal_scope().context == {
        "tags": {"region": "eu", "team": "core"},
        "extra": {"attempt": 3},
        "user": {"id": "42"},
    }

    await sentry_core.capture_event({"tags": {"region": "us"}})
    assert backend.events[0]["tags"] == {"region": "us", "team": "core"}


@pytest.mark.asyncio
async def test_set_user_merges(sentry_init):
    client = sentry_init(VALID_DSN)
    await sentry_core.set_user({"id": "42", "email": "old@example.com"})
    await sentry_core.set_user({"email": "new@example.com"})

    assert client.get_internal_scope().context["user"] == {
        "id": "42",
        "email": "new@example.com",
    }


@pytest.mark.asyncio
async def test_per_request_scopes(sentry_init, backend):
    sentry_init(VALID_DSN)
    first, second = Scope(), Scope()

    await sentry_core.add_breadcrumb(message="first", scope=first)
    await sentry_core.add_breadcrumb(message="second", scope=second)
    await sentry_core.capture_message("done", scope=second)

    (event,) = backend.events
    assert [c["message"] for c in event["breadcrumbs"]] == ["second"]
