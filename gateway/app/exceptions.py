"""Exception hierarchy for the gateway."""

GENERIC_ERROR_MESSAGE = "Erro interno no servidor"
AUTH_REQUIRED_MESSAGE = "Autenticação necessária"


class GatewayError(Exception):
    """Base exception for all gateway errors."""


class AuthMissing(GatewayError):
    """Raised when a privileged route is called without a forwarded credential."""

    status_code = 401

    def __init__(self, message: str = AUTH_REQUIRED_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class AggregationFailure(GatewayError):
    """Raised when the health report itself cannot be assembled."""
