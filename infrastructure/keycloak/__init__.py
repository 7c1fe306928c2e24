from .client import InvalidTokenError, KeycloakClient, KeycloakError

__all__ = ["InvalidTokenError", "KeycloakClient", "KeycloakError"]
