"""Entry point composing every resource service around one connection."""
from __future__ import annotations
import logging
from typing import Optional

from ...config.settings import KeycloakSettings, load_settings
from .client import KeycloakClient
from .groups import GroupService
from .realm import ClientService, RealmService
from .roles import RoleService
from .users import UserService

logger = logging.getLogger(__name__)


class KeycloakAdmin:
    """Navigable view of the Admin API for one authenticated connection.

    Usage:
        admin = connect(load_settings())
        groups = admin.groups.find("master")
        members = admin.groups.members.find("master", groups[0]["id"])
        admin.clients.authorizations.permissions.find("master", client_uuid)
    """

    def __init__(self, client: KeycloakClient):
        self.client = client
        self.realms = RealmService(client)
        self.clients = ClientService(client)
        self.roles = RoleService(client)
        self.groups = GroupService(client)
        self.users = UserService(client)

    @property
    def base_url(self) -> str:
        return self.client.base_url

    @classmethod
    def from_settings(cls, settings: KeycloakSettings) -> "KeycloakAdmin":
        """Build a connection from settings and log in with its grant type."""
        settings.validate()
        client = KeycloakClient(settings.base_url, timeout=settings.timeout, verify=settings.verify_ssl)
        if settings.grant_type == "client_credentials":
            client.authenticate_service_account(settings.auth_realm, settings.client_id, settings.client_secret)
        else:
            client.authenticate_admin(
                settings.username,
                settings.password,
                realm=settings.auth_realm,
                client_id=settings.client_id,
            )
        return cls(client)


def connect(settings: Optional[KeycloakSettings] = None) -> KeycloakAdmin:
    """Authenticate and return a KeycloakAdmin (settings default to the environment)."""
    return KeycloakAdmin.from_settings(settings or load_settings())
