"""Keycloak-specific exceptions for error handling."""
from __future__ import annotations
from typing import Any


class KeycloakError(Exception):
    """Base exception for all Keycloak operations."""
    pass


class MissingArgumentError(KeycloakError, ValueError):
    """A required argument was not supplied; raised before any request is made.

    Attributes:
        argument: Name of the missing argument
    """

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"{argument} is missing")


class KeycloakAPIError(KeycloakError):
    """Keycloak answered with a status code other than the expected one.

    Attributes:
        status_code: HTTP status code
        body: Response payload (decoded JSON when possible, raw text otherwise)
        message: Error message from response
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, body: Any, endpoint: str):
        self.status_code = status_code
        self.body = body
        self.message = _describe(body)
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {self.message}")


class KeycloakAuthError(KeycloakAPIError):
    """Token request rejected, or a request attempted before authenticating."""
    pass


def _describe(body: Any) -> str:
    if isinstance(body, dict):
        for key in ("errorMessage", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    if body is None:
        return ""
    return str(body)
