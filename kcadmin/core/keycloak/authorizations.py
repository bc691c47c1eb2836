"""Fine-grained authorization (resource server) operations of a client.

Resources, policies and permissions all live under
``/admin/realms/{realm}/clients/{id}/authz/resource-server/{kind}``. Policies and
permissions are additionally addressed by their ``type`` (``role``, ``user``,
``js``, ``resource``, ``scope``...), resources are not.
"""
from __future__ import annotations
import logging
from typing import Any, Optional, Union

from .client import KeycloakClient
from .exceptions import MissingArgumentError
from .validators import require, require_field, segment

logger = logging.getLogger(__name__)


class _ResourceServerService:
    """CRUD operations for one kind of resource server entity.

    Subclasses set ``kind`` (the URL segment), ``typed`` (whether the entity
    type is part of create/find/update URLs) and ``id_keys`` (the keys the
    entity id may be stored under, in order of preference).
    """

    kind = ""
    typed = True
    id_keys = ("id",)

    def __init__(self, client: KeycloakClient):
        """Initialize the service.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client

    def _base(self, realm: str, client_uuid: str) -> str:
        return (
            f"/admin/realms/{segment(realm)}/clients/{segment(client_uuid)}"
            f"/authz/resource-server/{self.kind}"
        )

    def _item(self, realm: str, client_uuid: str, record: dict) -> str:
        path = self._base(realm, client_uuid)
        if self.typed:
            path += f"/{require_field(record, 'type', self.kind)}"
        return f"{path}/{segment(self._entity_id(record))}"

    def _entity_id(self, record: dict) -> str:
        for key in self.id_keys:
            if record.get(key):
                return record[key]
        raise MissingArgumentError(f"{self.kind}.id")

    def create(self, realm: str, client_uuid: str, record: Optional[dict]) -> Any:
        """Create an entity on the client's resource server.

        Args:
            realm: Realm name (not the realm id), e.g. "master"
            client_uuid: Internal id of the client (not its clientId)
            record: JSON representation; its name must be unique within the client

        Returns:
            The created representation as returned by Keycloak

        Raises:
            MissingArgumentError: If record (or, for typed kinds, its type) is absent
            KeycloakAPIError: If Keycloak does not answer 201
        """
        require(record, self.kind)
        path = self._base(realm, client_uuid)
        if self.typed:
            path += f"/{require_field(record, 'type', self.kind)}"
        resp = self.client.post(path, json=record, expected=201)
        logger.info("Created %s '%s' on client %s", self.kind, record.get("name"), client_uuid)
        return self.client.json(resp)

    def find(
        self,
        realm: str,
        client_uuid: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> Union[dict, list]:
        """Return every entity of the client, or one entity.

        For typed kinds both ``entity_type`` and ``entity_id`` must be given to
        address a single entity; with only one of them the full list is returned.

        Returns:
            A single representation or a list of representations

        Raises:
            KeycloakAPIError: If Keycloak does not answer 200
        """
        path = self._base(realm, client_uuid)
        if entity_id and (entity_type or not self.typed):
            path = self._item(realm, client_uuid, {"type": entity_type, "id": entity_id})
        return self.client.json(self.client.get(path, expected=200))

    def update(self, realm: str, client_uuid: str, record: Optional[dict]) -> Union[dict, list]:
        """Replace an entity and return its stored state.

        Keycloak acknowledges updates with an empty body, so the entity is read
        back with ``find`` using the record's type and id.

        Raises:
            MissingArgumentError: If record, its id, or (typed kinds) its type is absent
            KeycloakAPIError: If Keycloak does not answer 204
        """
        require(record, self.kind)
        self.client.put(self._item(realm, client_uuid, record), json=record, expected=204)
        return self.find(realm, client_uuid, record.get("type"), self._entity_id(record))

    def remove(self, realm: str, client_uuid: str, entity_id: Optional[str]) -> None:
        """Delete an entity by id.

        Raises:
            MissingArgumentError: If entity_id is absent
            KeycloakAPIError: If Keycloak does not answer 204
        """
        require(entity_id, f"{self.kind}Id")
        self.client.delete(f"{self._base(realm, client_uuid)}/{segment(entity_id)}", expected=204)
        logger.info("Removed %s %s from client %s", self.kind, entity_id, client_uuid)


class AuthorizationResourceService(_ResourceServerService):
    """Protected resources of a client's resource server."""

    kind = "resource"
    typed = False
    # Keycloak serialises a resource id as "_id"
    id_keys = ("_id", "id")


class AuthorizationPolicyService(_ResourceServerService):
    """Policies (role, user, group, time, js, aggregate...) of a resource server."""

    kind = "policy"


class AuthorizationPermissionService(_ResourceServerService):
    """Resource- and scope-based permissions of a resource server."""

    kind = "permission"


class AuthorizationService:
    """Groups the resource server services of one connection.

    Usage:
        authz = AuthorizationService(client)
        authz.permissions.create("master", client_uuid, {"type": "resource", ...})
    """

    def __init__(self, client: KeycloakClient):
        self.client = client
        self.resources = AuthorizationResourceService(client)
        self.policies = AuthorizationPolicyService(client)
        self.permissions = AuthorizationPermissionService(client)
