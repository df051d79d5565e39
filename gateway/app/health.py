"""
Health Aggregation
==================

Combines the gateway's own liveness with a probe of the upstream API.

Status split:
    - The gateway answers and the probe completes: outer status "ok", with the
      backend reported "online" or "offline" depending on the upstream status.
    - The probe cannot complete (network error, timeout, anything else):
      outer status "error", backend "offline".

check_health never raises; every path yields a HealthReport.
"""

import logging
from typing import Any, Optional

import httpx

from .config import Settings
from .exceptions import AggregationFailure
from .models import BackendStatus, GatewayInfo, HealthError, HealthReport

logger = logging.getLogger("gateway.health")

NO_RESPONSE_MESSAGE = "No response from backend"
CONNECT_FAILED_MESSAGE = "Failed to connect to backend"
PROBE_FAILED_MESSAGE = "Health probe failed"


class HealthAggregator:
    """Probe the upstream root route and build a HealthReport."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def probe_url(self) -> str:
        return self._settings.upstream_base_url

    async def _probe(self) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._settings.UPSTREAM_TIMEOUT_SECONDS,
            ) as client:
                return await client.get(
                    self.probe_url,
                    headers={"Content-Type": "application/json", "Cache-Control": "no-store"},
                )
        except httpx.HTTPError as e:
            raise AggregationFailure(f"Backend probe failed: {e!r}") from e

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        try:
            data = response.json()
        except ValueError:
            return NO_RESPONSE_MESSAGE
        # Empty scalars ("", 0, false, null) count as no response; {} and [] do not.
        if data is None or (isinstance(data, (str, int, float)) and not data):
            return NO_RESPONSE_MESSAGE
        return data

    def _report(self, status: str, backend: BackendStatus, error: Optional[HealthError] = None) -> HealthReport:
        return HealthReport(
            status=status,
            environment=self._settings.ENVIRONMENT,
            gateway=GatewayInfo(version=self._settings.APP_VERSION),
            backend=backend,
            error=error,
        )

    async def check_health(self) -> HealthReport:
        """
        Probe the upstream once, uncached.

        Returns:
            HealthReport; status "error" only when the probe itself failed
        """
        try:
            response = await self._probe()
            backend_status = "online" if response.is_success else "offline"
            if backend_status == "offline":
                logger.warning(
                    f"Backend reachable but unhealthy: {response.status_code}",
                    extra={"status_code": response.status_code},
                )
            return self._report(
                "ok",
                BackendStatus(status=backend_status, message=self._parse_body(response)),
            )
        except Exception as e:
            logger.error(f"Health check error: {e}", exc_info=not isinstance(e, AggregationFailure))
            detail = str(e) if self._settings.LOG_LEVEL == "DEBUG" else PROBE_FAILED_MESSAGE
            return self._report(
                "error",
                BackendStatus(status="offline", message=CONNECT_FAILED_MESSAGE),
                error=HealthError(message=detail),
            )
