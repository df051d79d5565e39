"""
Authentication Package

This package handles the authentication-related surface of the gateway.
The gateway never validates credentials itself; it forwards login and
registration to the upstream API and checks for the presence of a
forwarded credential on privileged routes.

Modules:
- routes: Public authentication endpoints (/auth/login, /auth/register)
- gate: Credential presence check used by privileged routes
"""

from .routes import auth_router

__all__ = [
    "auth_router",
]
