"""Identity and bearer-token authentication clients."""

from infinity_clients.auth.client import AuthClient
from infinity_clients.auth.messages import describe_auth_error, describe_result
from infinity_clients.auth.models import AuthResult, Session
from infinity_clients.auth.token import TokenAuthClient

__all__ = [
    "AuthClient",
    "TokenAuthClient",
    "AuthResult",
    "Session",
    "describe_auth_error",
    "describe_result",
]
