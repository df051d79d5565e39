"""
Storefront BFF Gateway
======================

Forwards authentication, store creation and product listing from the
storefront client to the upstream API, normalizing every outcome into one
client contract, and reports composite gateway/upstream health.

Packages:
    - auth: /auth/login, /auth/register and the credential presence gate
    - proxy: forwarding, normalization and the proxied store/product routes
    - health: upstream liveness aggregation
"""
