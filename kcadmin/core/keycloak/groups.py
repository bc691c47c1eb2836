"""Keycloak group management operations."""
from __future__ import annotations
import logging
from typing import Optional, Union

from .client import KeycloakClient
from .exceptions import KeycloakError
from .validators import require, require_field, segment

logger = logging.getLogger(__name__)


class GroupService:
    """Service for managing Keycloak groups.

    ``members`` lists the users of a group.
    """

    def __init__(self, client: KeycloakClient):
        """Initialize group service.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client
        self.members = GroupMemberService(client)

    def find(self, realm: str, group_id: Optional[str] = None, **query) -> Union[dict, list]:
        """Return the top-level groups of a realm, or a single group.

        Args:
            realm: Realm name
            group_id: Optional group id; when given only that group is returned
            **query: Query parameters for the listing (search, first, max, briefRepresentation)

        Returns:
            Group representation or list of group representations
        """
        path = f"/admin/realms/{segment(realm)}/groups"
        if group_id:
            return self.client.json(self.client.get(f"{path}/{segment(group_id)}"))
        return self.client.json(self.client.get(path, params=query or None))

    def create(self, realm: str, group: Optional[dict]) -> dict:
        """Create a top-level group and return it.

        The create endpoint answers 201 with an empty body and a Location
        header, which is used to read the new group back. Without that header
        the group is looked up by name.

        Raises:
            MissingArgumentError: If group is absent
            KeycloakAPIError: If Keycloak does not answer 201
        """
        require(group, "group")
        resp = self.client.post(f"/admin/realms/{segment(realm)}/groups", json=group)
        group_id = self.client.location_id(resp)
        logger.info("Group '%s' created (id=%s)", group.get("name"), group_id)
        if group_id:
            return self.find(realm, group_id)
        for candidate in self.find(realm, search=group.get("name"), exact="true"):
            if candidate.get("name") == group.get("name"):
                return candidate
        raise KeycloakError(f"Failed to retrieve group '{group.get('name')}' after creation")

    def update(self, realm: str, group: Optional[dict]) -> dict:
        """Update a group and return its stored state.

        Raises:
            MissingArgumentError: If group or its id is absent
            KeycloakAPIError: If Keycloak does not answer 204
        """
        require(group, "group")
        group_id = require_field(group, "id", "group")
        self.client.put(f"/admin/realms/{segment(realm)}/groups/{group_id}", json=group)
        return self.find(realm, group["id"])

    def remove(self, realm: str, group_id: Optional[str]) -> None:
        """Delete a group.

        Raises:
            MissingArgumentError: If group_id is absent
        """
        require(group_id, "groupId")
        self.client.delete(f"/admin/realms/{segment(realm)}/groups/{segment(group_id)}")
        logger.info("Group %s removed", group_id)


class GroupMemberService:
    """Read access to the users of a group."""

    def __init__(self, client: KeycloakClient):
        self.client = client

    def find(
        self,
        realm: str,
        group_id: Optional[str],
        first: Optional[int] = None,
        max: Optional[int] = None,
    ) -> list[dict]:
        """Retrieve the members of a group.

        Args:
            realm: Realm name
            group_id: Group ID
            first: Pagination offset
            max: Maximum number of members to return

        Returns:
            List of user representations
        """
        require(group_id, "groupId")
        params = {key: value for key, value in (("first", first), ("max", max)) if value is not None}
        resp = self.client.get(
            f"/admin/realms/{segment(realm)}/groups/{segment(group_id)}/members",
            params=params or None,
        )
        return self.client.json(resp) or []
