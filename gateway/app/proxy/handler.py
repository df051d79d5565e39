"""
Framework-independent proxy handler.

A ProxyRoute describes one forwarded operation; handle_proxy runs it:

    AuthGate (privileged routes) -> RequestForwarder -> ResponseNormalizer

Every fault is caught here, so callers always get a ClientResponse back.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from ..auth.gate import find_credential, require_auth
from ..exceptions import AuthMissing
from ..models import AuthContext, ClientResponse, ProxyRequest
from .forwarder import NO_BODY, RequestForwarder
from .normalizer import error_response, internal_error, normalize

logger = logging.getLogger(__name__)


class ProxyRoute(BaseModel):
    """Static description of a forwarded route."""

    model_config = ConfigDict(frozen=True)

    name: str
    method: str
    upstream_route: str
    default_message: str
    requires_auth: bool = False
    pass_query: bool = False
    lenient_errors: bool = False


# ============================================================================
# Route Table
# ============================================================================

LOGIN = ProxyRoute(
    name="login",
    method="POST",
    upstream_route="/auth/login",
    default_message="Falha na autenticação",
)

REGISTER = ProxyRoute(
    name="register",
    method="POST",
    upstream_route="/auth/register",
    default_message="Falha no registro",
)

CREATE_TENANT = ProxyRoute(
    name="create_tenant",
    method="POST",
    upstream_route="/tenants",
    default_message="Falha ao criar loja",
    requires_auth=True,
)

LIST_PRODUCTS = ProxyRoute(
    name="list_products",
    method="GET",
    upstream_route="/products",
    default_message="Falha ao buscar produtos",
    pass_query=True,
    lenient_errors=True,
)


def build_proxy_request(
    route: ProxyRoute,
    headers: Mapping[str, str],
    body: Optional[Any] = None,
    params: Optional[Mapping[str, str]] = None,
) -> ProxyRequest:
    return ProxyRequest(
        route=route.upstream_route,
        method=route.method,
        headers=dict(headers),
        body=body,
        has_body=route.method != "GET",
        params=dict(params or {}) if route.pass_query else {},
    )


async def handle_proxy(
    route: ProxyRoute,
    request: ProxyRequest,
    forwarder: RequestForwarder,
    body_error: Optional[str] = None,
) -> ClientResponse:
    """
    Run one proxied request end to end.

    Args:
        route: Route description (auth requirement, default message)
        request: Inbound request reduced to route, method, headers, body
        forwarder: Upstream forwarder
        body_error: Set when the inbound body could not be parsed; checked
            after the auth gate so missing credentials still yield 401

    Returns:
        ClientResponse, never raises
    """
    try:
        if route.requires_auth:
            auth = require_auth(request.headers)
        else:
            auth = AuthContext(raw_credential=find_credential(request.headers))

        if body_error is not None:
            logger.error(f"Invalid request body on {route.name}: {body_error}")
            return internal_error()

        result = await forwarder.forward(
            request.route,
            request.method,
            request.headers,
            request.body if request.has_body else NO_BODY,
            params=request.params,
            lenient_errors=route.lenient_errors,
            auth=auth,
        )
        return normalize(result, route.default_message)

    except AuthMissing as e:
        return error_response(e.status_code, e.message)
    except Exception as e:
        logger.error(
            f"Unexpected error in {route.name}: {e}",
            exc_info=True,
            extra={"route": route.upstream_route},
        )
        return internal_error()
