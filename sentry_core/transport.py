import asyncio
import gzip
import io
from urllib.request import getproxies

import certifi
import urllib3

from sentry_core.backend import Backend
from sentry_core.consts import SDK_INFO
from sentry_core.utils import Dsn, event_from_exception, json_dumps, logger

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, Dict, Optional, Union

    from urllib3.poolmanager import PoolManager, ProxyManager

    from sentry_core._types import Breadcrumb, Context, Event
    from sentry_core.scope import Scope


class HttpTransport(Backend):
    """The default HTTP backend.

    Events are gzipped JSON posted to the store endpoint of the DSN. The
    request itself is blocking and runs in the event loop's default
    executor. The response status code is returned as is, it is up to the
    frontend to classify it.
    """

    def __init__(
        self, options  # type: Dict[str, Any]
    ):
        # type: (...) -> None
        Backend.__init__(self, options)
        self.parsed_dsn = Dsn(options["dsn"])
        self._auth = self.parsed_dsn.to_auth(
            "%s/%s" % (SDK_INFO["name"], SDK_INFO["version"])
        )

        self._pool = self._make_pool(
            self.parsed_dsn,
            http_proxy=options.get("http_proxy"),
            https_proxy=options.get("https_proxy"),
            ca_certs=options.get("ca_certs"),
        )

    def install(self):
        # type: () -> bool
        return True

    async def event_from_exception(self, exception):
        # type: (Any) -> Event
        return event_from_exception(exception)

    async def event_from_message(self, message):
        # type: (str) -> Event
        return {"message": message, "level": "info"}

    async def store_breadcrumb(self, breadcrumb, scope):
        # type: (Breadcrumb, Scope) -> bool
        return True

    async def store_context(self, context, scope):
        # type: (Context, Scope) -> bool
        return True

    async def send_event(self, event):
        # type: (Event) -> int
        body = io.BytesIO()
        with gzip.GzipFile(fileobj=body, mode="w") as f:
            f.write(json_dumps(event))

        logger.debug(
            "Sending event, level:%s project:%s host:%s",
            event.get("level") or "null",
            self.parsed_dsn.project_id,
            self.parsed_dsn.host,
        )

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            self._send_request,
            body.getvalue(),
            {"Content-Type": "application/json", "Content-Encoding": "gzip"},
        )

    def _send_request(
        self,
        body,  # type: bytes
        headers,  # type: Dict[str, str]
    ):
        # type: (...) -> int
        headers.update(
            {
                "User-Agent": str(self._auth.client),
                "X-Sentry-Auth": str(self._auth.to_header()),
            }
        )
        response = self._pool.request(
            "POST",
            self._auth.store_api_url,
            body=body,
            headers=headers,
        )

        try:
            if response.status == 429:
                logger.warning("Rate limited by server, event was dropped")

            elif response.status >= 300 or response.status < 200:
                logger.error(
                    "Unexpected status code: %s (body: %s)",
                    response.status,
                    response.data,
                )
            return response.status
        finally:
            response.close()

    def _get_pool_options(self, ca_certs):
        # type: (Optional[Any]) -> Dict[str, Any]
        return {
            "num_pools": 2,
            "cert_reqs": "CERT_REQUIRED",
            "ca_certs": ca_certs or certifi.where(),
        }

    def _in_no_proxy(self, parsed_dsn):
        # type: (Dsn) -> bool
        no_proxy = getproxies().get("no")
        if not no_proxy:
            return False
        for host in no_proxy.split(","):
            host = host.strip()
            if parsed_dsn.host.endswith(host) or parsed_dsn.netloc.endswith(host):
                return True
        return False

    def _make_pool(
        self,
        parsed_dsn,  # type: Dsn
        http_proxy,  # type: Optional[str]
        https_proxy,  # type: Optional[str]
        ca_certs,  # type: Optional[Any]
    ):
        # type: (...) -> Union[PoolManager, ProxyManager]
        proxy = None
        no_proxy = self._in_no_proxy(parsed_dsn)

        # try HTTPS first
        if parsed_dsn.scheme == "https" and (https_proxy != ""):
            proxy = https_proxy or (not no_proxy and getproxies().get("https"))

        # maybe fallback to HTTP proxy
        if not proxy and (http_proxy != ""):
            proxy = http_proxy or (not no_proxy and getproxies().get("http"))

        opts = self._get_pool_options(ca_certs)

        if proxy:
            return urllib3.ProxyManager(proxy, **opts)
        else:
            return urllib3.PoolManager(**opts)

    def kill(self):
        # type: () -> None
        """Closes all pooled connections."""
        logger.debug("Killing HTTP transport")
        self._pool.clear()
