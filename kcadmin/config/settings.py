"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

logger = logging.getLogger(__name__)

GRANT_TYPES = ("password", "client_credentials")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)
        else:
            if secret_value:
                logger.debug("Loaded %s from /run/secrets", secret_name)
                return secret_value

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment", env_var)
            return secret_value

    return None


def _env_bool(var_name: str, default: bool) -> bool:
    value = os.environ.get(var_name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class KeycloakSettings:
    """Connection settings for the Keycloak Admin API."""
    base_url: str = "http://localhost:8080"
    auth_realm: str = "master"

    # Login flow: "password" (admin user) or "client_credentials" (service account)
    grant_type: str = "password"
    client_id: str = "admin-cli"
    client_secret: str = ""
    username: str = "admin"
    password: str = ""

    # HTTP; a timeout of None waits on the server indefinitely
    timeout: Optional[float] = 5
    verify_ssl: bool = True

    def validate(self) -> "KeycloakSettings":
        """Check that the login flow has what it needs.

        Raises:
            ValueError: On an unknown grant type or missing credentials
        """
        if self.grant_type not in GRANT_TYPES:
            raise ValueError(
                f"Unsupported grant type '{self.grant_type}' (expected one of: {', '.join(GRANT_TYPES)})"
            )
        if self.grant_type == "client_credentials" and not self.client_secret:
            raise ValueError(
                "KEYCLOAK_CLIENT_SECRET is required for the client_credentials grant. "
                "Provide it via Docker secrets or environment variable."
            )
        if self.grant_type == "password" and not (self.username and self.password):
            raise ValueError("KEYCLOAK_ADMIN and KEYCLOAK_ADMIN_PASSWORD are required for the password grant.")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("KEYCLOAK_TIMEOUT must be a positive number of seconds or \"none\"")
        return self


def load_settings() -> KeycloakSettings:
    """Load Keycloak connection settings from environment and /run/secrets."""
    timeout_raw = os.environ.get("KEYCLOAK_TIMEOUT", "5").strip()
    timeout: Optional[float] = None
    if timeout_raw.lower() != "none":
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(f"KEYCLOAK_TIMEOUT must be numeric or \"none\", got '{timeout_raw}'") from None

    settings = KeycloakSettings(
        base_url=os.environ.get("KEYCLOAK_URL", "http://localhost:8080").rstrip("/"),
        auth_realm=os.environ.get("KEYCLOAK_AUTH_REALM", "master"),
        grant_type=os.environ.get("KEYCLOAK_GRANT_TYPE", "password").strip().lower(),
        client_id=os.environ.get("KEYCLOAK_CLIENT_ID", "admin-cli"),
        client_secret=_load_secret_from_file("keycloak_client_secret", "KEYCLOAK_CLIENT_SECRET") or "",
        username=os.environ.get("KEYCLOAK_ADMIN", "admin"),
        password=_load_secret_from_file("keycloak_admin_password", "KEYCLOAK_ADMIN_PASSWORD") or "",
        timeout=timeout,
        verify_ssl=_env_bool("KEYCLOAK_VERIFY_SSL", True),
    )
    return settings.validate()
