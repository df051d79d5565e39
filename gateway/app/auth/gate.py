"""
Credential Presence Gate
========================

Privileged routes (tenant creation) require the client to send a forwarded
credential in the Authorization header. The gateway does not decode or verify
it; the upstream API is responsible for validation. This module only checks
that the header is there and carries its value along unchanged.
"""

import logging
from typing import Mapping, Optional

from ..exceptions import AuthMissing
from ..models import AuthContext

logger = logging.getLogger(__name__)

CREDENTIAL_HEADER = "Authorization"


def find_credential(headers: Mapping[str, str]) -> Optional[str]:
    """
    Look up the forwarded credential header, ignoring header name case.

    Args:
        headers: Inbound header mapping (plain dict or Starlette Headers)

    Returns:
        Raw header value, or None when absent or empty
    """
    target = CREDENTIAL_HEADER.lower()
    for name, value in headers.items():
        if name.lower() == target:
            return value or None
    return None


def require_auth(headers: Mapping[str, str]) -> AuthContext:
    """
    Ensure a forwarded credential is present.

    Args:
        headers: Inbound header mapping

    Returns:
        AuthContext carrying the unexamined credential

    Raises:
        AuthMissing: If the credential header is absent
    """
    credential = find_credential(headers)
    if credential is None:
        logger.info("Rejected privileged request without credential")
        raise AuthMissing()
    return AuthContext(raw_credential=credential)

