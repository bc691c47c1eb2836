"""Keycloak role management operations (realm roles and client roles)."""
from __future__ import annotations
import logging
from typing import Optional, Union

from .client import KeycloakClient
from .validators import require, require_field, segment

logger = logging.getLogger(__name__)


class RoleService:
    """Service for managing realm-level roles.

    Roles are addressed by name; creating or updating one reads it back by
    name because Keycloak answers those calls without a body.
    """

    def __init__(self, client: KeycloakClient):
        """Initialize role service.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client

    def _path(self, realm: str) -> str:
        return f"/admin/realms/{segment(realm)}/roles"

    def find(self, realm: str, role_name: Optional[str] = None) -> Union[dict, list]:
        """Return every realm role, or one role by name."""
        if role_name:
            return self.client.json(self.client.get(f"{self._path(realm)}/{segment(role_name)}"))
        return self.client.json(self.client.get(self._path(realm)))

    def create(self, realm: str, role: Optional[dict]) -> dict:
        """Create a realm role and return it.

        Raises:
            MissingArgumentError: If role or its name is absent
            KeycloakAPIError: If Keycloak does not answer 201 (409 when the name exists)
        """
        require(role, "role")
        require_field(role, "name", "role")
        self.client.post(self._path(realm), json=role)
        logger.info("Role '%s' created", role["name"])
        return self.find(realm, role["name"])

    def update(self, realm: str, role: Optional[dict], role_name: Optional[str] = None) -> dict:
        """Update a realm role and return its stored state.

        Args:
            realm: Realm name
            role: Role representation
            role_name: Current name when the update renames the role
        """
        require(role, "role")
        current = role_name or require(role.get("name"), "role.name")
        self.client.put(f"{self._path(realm)}/{segment(current)}", json=role)
        return self.find(realm, role.get("name") or current)

    def remove(self, realm: str, role_name: Optional[str]) -> None:
        """Delete a realm role by name."""
        require(role_name, "roleName")
        self.client.delete(f"{self._path(realm)}/{segment(role_name)}")
        logger.info("Role '%s' removed", role_name)


class ClientRoleService:
    """Service for managing the roles of one client."""

    def __init__(self, client: KeycloakClient):
        self.client = client

    def _path(self, realm: str, client_uuid: Optional[str]) -> str:
        require(client_uuid, "id")
        return f"/admin/realms/{segment(realm)}/clients/{segment(client_uuid)}/roles"

    def find(self, realm: str, client_uuid: Optional[str], role_name: Optional[str] = None) -> Union[dict, list]:
        """Return every role of the client, or one role by name."""
        path = self._path(realm, client_uuid)
        if role_name:
            path += f"/{segment(role_name)}"
        return self.client.json(self.client.get(path))

    def create(self, realm: str, client_uuid: Optional[str], role: Optional[dict]) -> dict:
        """Create a client role and return it.

        Raises:
            MissingArgumentError: If role or its name is absent
        """
        path = self._path(realm, client_uuid)
        require(role, "role")
        require_field(role, "name", "role")
        self.client.post(path, json=role)
        logger.info("Client role '%s' created on %s", role["name"], client_uuid)
        return self.find(realm, client_uuid, role["name"])

    def update(
        self,
        realm: str,
        client_uuid: Optional[str],
        role: Optional[dict],
        role_name: Optional[str] = None,
    ) -> dict:
        """Update a client role and return its stored state."""
        path = self._path(realm, client_uuid)
        require(role, "role")
        current = role_name or require(role.get("name"), "role.name")
        self.client.put(f"{path}/{segment(current)}", json=role)
        return self.find(realm, client_uuid, role.get("name") or current)

    def remove(self, realm: str, client_uuid: Optional[str], role_name: Optional[str]) -> None:
        """Delete a client role by name."""
        path = self._path(realm, client_uuid)
        require(role_name, "roleName")
        self.client.delete(f"{path}/{segment(role_name)}")
        logger.info("Client role '%s' removed from %s", role_name, client_uuid)
