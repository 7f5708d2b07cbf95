"""Uplink client for measurement reports."""

import logging
from typing import Optional

import httpx

from sensornode.models.upload import TRANSPORT_FAILURE, UploadResult


class UplinkClient:
    """Sends GET <endpoint>?api_key=<key>&field1=<value> requests.

    Anything but HTTP 200 is "not accepted". 4xx, 5xx and transport errors
    are not told apart by callers; transport errors report status -1.
    """

    def __init__(
        self,
        endpoint: str = "http://api.thingspeak.com/update",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize uplink client.

        Args:
            endpoint: Base URL of the update endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests, proxies)
        """
        self.logger = logging.getLogger("sensornode.uplink")
        self.endpoint = endpoint
        self.timeout = timeout
        self.transport = transport

    def _params(self, key: str, value: int) -> dict[str, str]:
        return {"api_key": key, "field1": str(value)}

    def build_url(self, key: str, value: int) -> str:
        """Full request URL for a key and field value."""
        return str(httpx.URL(self.endpoint, params=self._params(key, value)))

    async def request(self, key: str, value: int) -> UploadResult:
        """Issue one request.

        Args:
            key: Upload (write) key
            value: field1 value

        Returns:
            UploadResult with the HTTP status, or -1 on transport failure
        """
        self.logger.debug(f"GET {self.endpoint} field1={value}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.endpoint, params=self._params(key, value))
        except httpx.HTTPError as e:
            self.logger.warning(f"Uplink request failed: {e}")
            return UploadResult(status_code=TRANSPORT_FAILURE, error=str(e))

        return UploadResult(status_code=response.status_code)

    async def report(self, key: str, value: int) -> UploadResult:
        """Upload one measurement."""
        result = await self.request(key, value)
        if result.accepted:
            self.logger.info(f"Measurement {value} uploaded (HTTP {result.status_code})")
        else:
            self.logger.warning(f"Measurement {value} not accepted (HTTP {result.status_code})")
        return result

    async def validate(self, key: str) -> UploadResult:
        """Probe whether the endpoint accepts a key (field1=0)."""
        result = await self.request(key, 0)
        self.logger.debug(f"Key validation returned HTTP {result.status_code}")
        return result
