"""Configuration module for the Keycloak admin client."""
from .settings import KeycloakSettings, load_settings

__all__ = ["KeycloakSettings", "load_settings"]
