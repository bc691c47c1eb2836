"""Client library for the Keycloak Admin REST API."""
from .core.keycloak import KeycloakAdmin, KeycloakClient, connect
from .config import KeycloakSettings, load_settings

__version__ = "0.1.0"

__all__ = ["KeycloakAdmin", "KeycloakClient", "connect", "KeycloakSettings", "load_settings"]
