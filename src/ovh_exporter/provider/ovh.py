import asyncio
import hashlib
import time
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()

ENDPOINTS: "dict[str, str]" = {
    "ovh-eu": "https://eu.api.ovh.com/1.0",
    "ovh-ca": "https://ca.api.ovh.com/1.0",
    "ovh-us": "https://api.us.ovhcloud.com/1.0",
    "kimsufi-eu": "https://eu.api.kimsufi.com/1.0",
    "kimsufi-ca": "https://ca.api.kimsufi.com/1.0",
    "soyoustart-eu": "https://eu.api.soyoustart.com/1.0",
    "soyoustart-ca": "https://ca.api.soyoustart.com/1.0",
}


def resolve_endpoint(endpoint: "str") -> "str":
    """
    maps an endpoint alias (e.g. "ovh-eu") to its base URL. Full
    URLs are returned unchanged, without the trailing slash.
    """
    if endpoint.startswith(("http://", "https://")):
        return endpoint.rstrip("/")

    try:
        return ENDPOINTS[endpoint]
    except KeyError:
        raise ValueError(
            f"unknown OVH API endpoint {endpoint!r}, expected a URL or one of: "
            + ", ".join(ENDPOINTS)
        ) from None


def sign(
    application_secret: "str",
    consumer_key: "str",
    method: "str",
    url: "str",
    body: "str",
    timestamp: "str",
) -> "str":
    """
    computes the X-Ovh-Signature header value of a request.
    """
    payload = "+".join(
        [application_secret, consumer_key, method.upper(), url, body, timestamp]
    )
    return "$1$" + hashlib.sha1(payload.encode("utf-8")).hexdigest()


class OVHAPIClient:
    """
    OVHAPIClient implements the OVHClient protocol over httpx. It
    signs every request with the application and consumer
    credentials, using the API server clock (fetched once from
    /auth/time) so that local clock drift does not invalidate
    signatures.
    """

    def __init__(
        self,
        endpoint: "str",
        application_key: "str",
        application_secret: "str",
        consumer_key: "str",
        timeout: "float" = 10.0,
    ) -> "None":
        self._base_url = resolve_endpoint(endpoint)
        self._application_key = application_key
        self._application_secret = application_secret
        self._consumer_key = consumer_key
        self._client: "httpx.AsyncClient" = httpx.AsyncClient(
            timeout=timeout,
            headers={"X-Ovh-Application": application_key},
        )
        self._time_delta: "int | None" = None
        self._time_lock: "asyncio.Lock" = asyncio.Lock()

    @property
    def base_url(self) -> "str":
        return self._base_url

    async def close(self) -> "None":
        """
        closes the underlying HTTP client.
        """
        await self._client.aclose()

    async def time_delta(self) -> "int":
        """
        returns the difference between the API server clock and
        the local clock, with caching.
        """
        if self._time_delta is not None:
            return self._time_delta

        async with self._time_lock:
            if self._time_delta is None:
                resp = await self._client.get(f"{self._base_url}/auth/time")
                resp.raise_for_status()
                self._time_delta = int(resp.json()) - int(time.time())
                logger.debug("ovh_time_delta", delta=self._time_delta)

        return self._time_delta

    async def get(self, path: "str") -> "Any":
        """
        performs a signed GET request and returns the decoded body.
        Non-2xx responses raise httpx.HTTPStatusError.
        """
        url = f"{self._base_url}{path}"
        timestamp = str(int(time.time()) + await self.time_delta())
        headers = {
            "X-Ovh-Consumer": self._consumer_key,
            "X-Ovh-Timestamp": timestamp,
            "X-Ovh-Signature": sign(
                self._application_secret,
                self._consumer_key,
                "GET",
                url,
                "",
                timestamp,
            ),
        }

        logger.debug("ovh_api_get", url=url)
        resp = await self._client.get(url, headers=headers)
        resp.raise_for_status()
        return resp.json()
