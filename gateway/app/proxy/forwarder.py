"""
Upstream Request Forwarding
===========================

Builds and issues the single outbound call for a proxied route.

Security Model:
---------------
1. Only Content-Type and the forwarded credential (Authorization) are sent
   upstream; every other inbound header is dropped
2. The credential is forwarded byte-for-byte, never inspected
3. Routes are fixed by the gateway, never taken from the client path

Failure Model:
--------------
Transport faults (refused connections, timeouts, DNS errors) and bodies that
are not valid JSON are returned as a TransportFailure value instead of being
raised. There are no retries: one failed attempt is terminal.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..auth.gate import CREDENTIAL_HEADER, find_credential
from ..config import Settings
from ..models import AuthContext, TransportFailure, UpstreamResponse, UpstreamResult

logger = logging.getLogger(__name__)

# Marks a request that carries no body, as opposed to a JSON null payload.
NO_BODY = object()


def build_upstream_headers(
    original_headers: Mapping[str, str],
    auth: Optional[AuthContext] = None,
) -> Dict[str, str]:
    """
    Build headers for the upstream request.

    Args:
        original_headers: Inbound request headers
        auth: Credential already extracted by the gate; looked up in
            original_headers when omitted

    Returns:
        Content-Type, plus Authorization when the client sent one
    """
    upstream_headers = {"Content-Type": "application/json"}

    credential = auth.raw_credential if auth is not None else find_credential(original_headers)
    if credential is not None:
        upstream_headers[CREDENTIAL_HEADER] = credential

    return upstream_headers


class RequestForwarder:
    """
    Forward requests to the upstream API.

    A new httpx.AsyncClient is opened per call; nothing is cached or pooled
    between requests.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            settings: Application settings (base URL, timeout)
            transport: Optional httpx transport, used to substitute a mock upstream
        """
        self._base_url = settings.upstream_base_url
        self._timeout = settings.UPSTREAM_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, route: str) -> str:
        return f"{self._base_url}{route}"

    def open_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    async def forward(
        self,
        route: str,
        method: str,
        headers: Mapping[str, str],
        body: Any = NO_BODY,
        params: Optional[Mapping[str, str]] = None,
        lenient_errors: bool = False,
        auth: Optional[AuthContext] = None,
    ) -> UpstreamResult:
        """
        Issue one upstream call and parse its JSON body.

        Args:
            route: Upstream route appended to the base URL
            method: HTTP method
            headers: Inbound headers (filtered by build_upstream_headers)
            body: JSON-serializable payload (None is sent as null), or NO_BODY
            params: Optional query parameters
            lenient_errors: Treat an unparseable body on a non-2xx response as {}
            auth: Credential carried from the gate

        Returns:
            UpstreamResponse on a completed exchange, TransportFailure otherwise
        """
        url = self.build_url(route)
        request_kwargs: Dict[str, Any] = {"headers": build_upstream_headers(headers, auth)}
        if body is not NO_BODY:
            request_kwargs["content"] = json.dumps(body)
        if params:
            request_kwargs["params"] = dict(params)

        logger.info(f"Forwarding {method.upper()} {route} to upstream")

        try:
            async with self.open_client() as client:
                response = await client.request(method.upper(), url, **request_kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Upstream timeout on {route}: {e!r}")
            return TransportFailure(reason=f"timeout: {e!r}")
        except httpx.HTTPError as e:
            logger.error(f"Upstream transport error on {route}: {e!r}")
            return TransportFailure(reason=f"transport error: {e!r}")

        try:
            data = response.json()
        except ValueError as e:
            if lenient_errors and not response.is_success:
                logger.warning(
                    f"Upstream error body on {route} is not JSON",
                    extra={"status_code": response.status_code},
                )
                data = {}
            else:
                logger.error(
                    f"Upstream returned malformed JSON on {route}",
                    extra={"status_code": response.status_code},
                )
                return TransportFailure(reason=f"malformed JSON body: {e}")

        logger.info(
            f"Upstream answered {route} with {response.status_code}",
            extra={"status_code": response.status_code},
        )
        return UpstreamResponse(status_code=response.status_code, body=data)
