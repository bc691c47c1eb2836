"""Keycloak realm and client management operations."""
from __future__ import annotations
import logging
from typing import Optional, Union

from .authorizations import AuthorizationService
from .client import KeycloakClient
from .exceptions import KeycloakError
from .roles import ClientRoleService
from .validators import require, require_field, segment

logger = logging.getLogger(__name__)


class RealmService:
    """Service for managing Keycloak realms."""

    def __init__(self, client: KeycloakClient):
        """Initialize realm service.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client

    def find(self, realm: Optional[str] = None) -> Union[dict, list]:
        """Return every realm, or a single realm by name."""
        if realm:
            return self.client.json(self.client.get(f"/admin/realms/{segment(realm)}"))
        return self.client.json(self.client.get("/admin/realms"))

    def create(self, realm_rep: Optional[dict]) -> dict:
        """Create a realm and return it.

        Args:
            realm_rep: Realm representation; ``realm`` holds the realm name

        Raises:
            MissingArgumentError: If the representation or its realm name is absent
            KeycloakAPIError: If Keycloak does not answer 201
        """
        require(realm_rep, "realm")
        require_field(realm_rep, "realm", "realm")
        self.client.post("/admin/realms", json=realm_rep)
        logger.info("Realm '%s' created", realm_rep["realm"])
        return self.find(realm_rep["realm"])

    def update(self, realm: str, realm_rep: Optional[dict]) -> dict:
        """Update a realm and return its stored state.

        A rename through ``realm_rep["realm"]`` is followed when reading back.
        """
        require(realm, "realmName")
        require(realm_rep, "realm")
        self.client.put(f"/admin/realms/{segment(realm)}", json=realm_rep)
        return self.find(realm_rep.get("realm") or realm)

    def remove(self, realm: Optional[str]) -> None:
        """Delete a realm."""
        require(realm, "realmName")
        self.client.delete(f"/admin/realms/{segment(realm)}")
        logger.info("Realm '%s' removed", realm)


class ClientService:
    """Service for managing the clients of a realm.

    ``roles`` manages client roles and ``authorizations`` the fine-grained
    authorization entities (resources, policies, permissions).
    """

    def __init__(self, client: KeycloakClient):
        self.client = client
        self.roles = ClientRoleService(client)
        self.authorizations = AuthorizationService(client)

    def _path(self, realm: str, client_uuid: Optional[str] = None) -> str:
        path = f"/admin/realms/{segment(realm)}/clients"
        if client_uuid:
            path += f"/{segment(client_uuid)}"
        return path

    def find(self, realm: str, client_uuid: Optional[str] = None, **query) -> Union[dict, list]:
        """Return the clients of a realm, or a single client.

        Args:
            realm: Realm name
            client_uuid: Optional internal client id
            **query: Listing filters, e.g. ``clientId="account"`` or ``search=True``

        Returns:
            Client representation or list of client representations
        """
        if client_uuid:
            return self.client.json(self.client.get(self._path(realm, client_uuid)))
        return self.client.json(self.client.get(self._path(realm), params=query or None))

    def create(self, realm: str, client_rep: Optional[dict]) -> dict:
        """Create a client and return it.

        Raises:
            MissingArgumentError: If the representation is absent
            KeycloakAPIError: If Keycloak does not answer 201 (409 when clientId is taken)
        """
        require(client_rep, "client")
        resp = self.client.post(self._path(realm), json=client_rep)
        client_uuid = self.client.location_id(resp)
        logger.info("Client '%s' created (id=%s)", client_rep.get("clientId"), client_uuid)
        if client_uuid:
            return self.find(realm, client_uuid)
        for candidate in self.find(realm, clientId=client_rep.get("clientId")):
            if candidate.get("clientId") == client_rep.get("clientId"):
                return candidate
        raise KeycloakError(f"Failed to retrieve client '{client_rep.get('clientId')}' after creation")

    def update(self, realm: str, client_rep: Optional[dict]) -> dict:
        """Update a client and return its stored state.

        Raises:
            MissingArgumentError: If the representation or its id is absent
        """
        require(client_rep, "client")
        require_field(client_rep, "id", "client")
        self.client.put(self._path(realm, client_rep["id"]), json=client_rep)
        return self.find(realm, client_rep["id"])

    def remove(self, realm: str, client_uuid: Optional[str]) -> None:
        """Delete a client."""
        require(client_uuid, "id")
        self.client.delete(self._path(realm, client_uuid))
        logger.info("Client %s removed", client_uuid)
