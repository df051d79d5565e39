"""
Response normalization.

Maps every upstream outcome onto a ClientResponse:

- transport failure  -> 500 with the generic message
- 2xx                -> status and body passed through unchanged
- anything else      -> upstream status, upstream ``message`` or the route default
"""

import logging
from typing import Any

from ..exceptions import GENERIC_ERROR_MESSAGE
from ..models import ClientResponse, TransportFailure, UpstreamResult

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> ClientResponse:
    return ClientResponse(status_code=status_code, body={"message": message})


def internal_error() -> ClientResponse:
    return error_response(500, GENERIC_ERROR_MESSAGE)


def extract_message(body: Any, default_message: str) -> str:
    """
    Prefer the upstream's own non-empty message.

    Validation errors from the upstream arrive as a list of strings; those are
    joined so the client always receives a single string.
    """
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
        if isinstance(message, list):
            parts = [part for part in message if isinstance(part, str) and part]
            if parts:
                return "; ".join(parts)
    return default_message


def normalize(result: UpstreamResult, route_default_message: str) -> ClientResponse:
    """
    Convert an upstream result into the client contract.

    Args:
        result: UpstreamResponse or TransportFailure from the forwarder
        route_default_message: Fallback message for upstream errors without one

    Returns:
        ClientResponse
    """
    if isinstance(result, TransportFailure):
        logger.error(f"Transport failure: {result.reason}")
        return internal_error()

    if result.ok:
        return ClientResponse(status_code=result.status_code, body=result.body)

    logger.warning(
        f"Upstream error {result.status_code}",
        extra={"status_code": result.status_code},
    )
    return error_response(result.status_code, extract_message(result.body, route_default_message))
