"""
Data Models Module

This module defines Pydantic models for the values that flow through the
gateway pipeline.

Models are organized by functional area:
- Inbound models (proxy requests, auth context)
- Upstream results (response or transport failure)
- Client-facing models (normalized responses, health reports)
"""

from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Inbound Models
# ============================================================================

class ProxyRequest(BaseModel):
    """One inbound request, reduced to what the forwarding pipeline needs."""

    model_config = ConfigDict(frozen=True)

    route: str = Field(..., description="Upstream route, e.g. /auth/login")
    method: str = Field(..., description="HTTP method")
    headers: Dict[str, str] = Field(default_factory=dict, description="Inbound headers")
    body: Optional[Any] = Field(None, description="Opaque JSON payload")
    has_body: bool = Field(False, description="Whether the route carries a body; a null body is still sent")
    params: Dict[str, str] = Field(default_factory=dict, description="Query parameters to pass through")


class AuthContext(BaseModel):
    """Forwarded credential, carried as-is for the duration of one request."""

    model_config = ConfigDict(frozen=True)

    raw_credential: Optional[str] = Field(None, description="Unparsed credential header value")


# ============================================================================
# Upstream Results
# ============================================================================

class UpstreamResponse(BaseModel):
    """A completed exchange with the upstream: status plus parsed JSON body."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299


class TransportFailure(BaseModel):
    """The upstream could not be reached or answered with unparseable content."""

    model_config = ConfigDict(frozen=True)

    reason: str = Field(..., description="Operator-facing fault description")


UpstreamResult = Union[UpstreamResponse, TransportFailure]


# ============================================================================
# Client-facing Models
# ============================================================================

class ClientResponse(BaseModel):
    """
    Uniform response returned by every proxy route.

    Non-2xx responses always carry a string ``message`` field.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: Any = None

    @model_validator(mode="after")
    def check_error_envelope(self) -> "ClientResponse":
        if not 200 <= self.status_code <= 299:
            if not isinstance(self.body, dict) or not isinstance(self.body.get("message"), str):
                raise ValueError("Error responses must carry a string 'message' field")
        return self


class BackendStatus(BaseModel):
    status: Literal["online", "offline"]
    message: Any


class GatewayInfo(BaseModel):
    version: str = "unknown"


class HealthError(BaseModel):
    message: str


class HealthReport(BaseModel):
    """Composite health of the gateway and the upstream it fronts."""

    status: Literal["ok", "error"]
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    environment: str
    gateway: GatewayInfo = Field(default_factory=GatewayInfo)
    backend: BackendStatus
    error: Optional[HealthError] = None
