from __future__ import annotations

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter


def default_timeout() -> httpx.Timeout:
    # The coordinator enforces the per-source budget; these only bound a single request.
    return httpx.Timeout(connect=5.0, read=30.0, write=10.0, pool=5.0)


def default_limits() -> httpx.Limits:
    return httpx.Limits(max_connections=20, max_keepalive_connections=10)


class HttpClientFactory:
    """Creates shared httpx clients with sane defaults.

    Keep one client per connector; do not create per-request.
    """

    @staticmethod
    def client(
        base_url: str | None = None,
        headers: dict | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url or "",
            headers=headers,
            timeout=default_timeout(),
            limits=default_limits(),
            follow_redirects=True,
            transport=transport,
        )


TransientHttpError = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


def transient_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=0.2, max=2.0),
        retry=retry_if_exception_type(TransientHttpError),
    )
