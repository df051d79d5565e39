"""
Proxy Package
=============

This package forwards storefront operations from the client application to
the upstream API and normalizes what comes back.

Main Components:
----------------
- forwarder.py: Outbound call construction and transport failure capture
- normalizer.py: Upstream result -> uniform client response
- handler.py: Framework-free pipeline and route table
- routes.py: FastAPI router with proxy endpoints (/tenants, /products)

Usage:
------
    from gateway.app.proxy import proxy_router
    app.include_router(proxy_router)
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
