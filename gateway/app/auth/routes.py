"""
Authentication Routes
=====================

Login and registration are forwarded to the upstream API unchanged; the
upstream issues and validates tokens. Neither route requires a credential.

Endpoints:
----------
- POST /auth/login
- POST /auth/register
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..proxy.handler import LOGIN, REGISTER
from ..proxy.routes import dispatch

auth_router = APIRouter()


@auth_router.post("/login")
async def login(request: Request) -> JSONResponse:
    """Forward credentials to the upstream login endpoint."""
    return await dispatch(LOGIN, request)


@auth_router.post("/register")
async def register(request: Request) -> JSONResponse:
    """Forward a new account to the upstream registration endpoint."""
    return await dispatch(REGISTER, request)
