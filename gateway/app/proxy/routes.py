"""
Proxy Routes - Upstream Request Forwarding
==========================================

FastAPI adapters for the forwarded storefront operations. Each endpoint
reduces the Starlette request to a ProxyRequest, runs handle_proxy, and
renders the resulting ClientResponse.

Endpoints:
----------
- POST /tenants: Create a store (requires Authorization)
- GET /products: List products, query string passed through
"""

import json
from typing import Any, Optional, Tuple

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ..models import ClientResponse
from .forwarder import RequestForwarder
from .handler import CREATE_TENANT, LIST_PRODUCTS, ProxyRoute, build_proxy_request, handle_proxy

proxy_router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_forwarder(request: Request) -> RequestForwarder:
    """
    Get the upstream forwarder from app state.

    Raises:
        HTTPException: If the application was not built by create_app
    """
    forwarder = getattr(request.app.state, "forwarder", None)
    if forwarder is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upstream forwarder not initialized",
        )
    return forwarder


# ============================================================================
# Adapter helpers
# ============================================================================

async def read_json_body(request: Request) -> Tuple[Optional[Any], Optional[str]]:
    """
    Parse the inbound JSON body.

    Returns:
        (body, None) on success, (None, error description) when the body is
        not valid JSON
    """
    raw = await request.body()
    try:
        return json.loads(raw), None
    except ValueError as e:
        return None, str(e)


def to_json_response(response: ClientResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body)


async def dispatch(route: ProxyRoute, request: Request) -> JSONResponse:
    """Adapt a Starlette request to handle_proxy and back."""
    forwarder = get_forwarder(request)

    body, body_error = (None, None)
    if route.method != "GET":
        body, body_error = await read_json_body(request)

    proxy_request = build_proxy_request(
        route,
        request.headers,
        body=body,
        params=request.query_params,
    )
    response = await handle_proxy(route, proxy_request, forwarder, body_error=body_error)
    return to_json_response(response)


# ============================================================================
# Proxy Endpoints
# ============================================================================

@proxy_router.post("/tenants")
async def proxy_create_tenant(request: Request) -> JSONResponse:
    """Forward store creation; rejected with 401 when Authorization is missing."""
    return await dispatch(CREATE_TENANT, request)


@proxy_router.get("/products")
async def proxy_list_products(request: Request) -> JSONResponse:
    """Forward product listing with the inbound query string."""
    return await dispatch(LIST_PRODUCTS, request)
