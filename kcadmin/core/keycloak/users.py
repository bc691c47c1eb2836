"""Keycloak user management operations."""
from __future__ import annotations
import logging
from typing import Optional, Union

from .client import KeycloakClient
from .exceptions import KeycloakError
from .validators import require, require_field, segment

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing Keycloak users.

    ``groups`` manages the group memberships of a user.
    """

    def __init__(self, client: KeycloakClient):
        """Initialize user service.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client
        self.groups = UserGroupService(client)

    def _path(self, realm: str, user_id: Optional[str] = None) -> str:
        path = f"/admin/realms/{segment(realm)}/users"
        if user_id:
            path += f"/{segment(user_id)}"
        return path

    def find(self, realm: str, user_id: Optional[str] = None, **query) -> Union[dict, list]:
        """Return the users of a realm, or a single user.

        Args:
            realm: Realm name
            user_id: Optional user id; when given only that user is returned
            **query: Search parameters (username, email, search, exact, first, max)

        Returns:
            User representation or list of user representations
        """
        if user_id:
            return self.client.json(self.client.get(self._path(realm, user_id)))
        return self.client.json(self.client.get(self._path(realm), params=query or None))

    def create(self, realm: str, user: Optional[dict]) -> dict:
        """Create a user and return the stored representation.

        Args:
            realm: Realm name
            user: User representation (username is mandatory for Keycloak)

        Returns:
            The created user, read back through the Location header or by username

        Raises:
            MissingArgumentError: If user is absent
            KeycloakAPIError: If Keycloak does not answer 201 (409 on duplicates)
        """
        require(user, "user")
        resp = self.client.post(self._path(realm), json=user)
        user_id = self.client.location_id(resp)
        logger.info("User '%s' created (id=%s)", user.get("username"), user_id)
        if user_id:
            return self.find(realm, user_id)
        username = (user.get("username") or "").lower()
        for candidate in self.find(realm, username=user.get("username"), exact="true"):
            # Keycloak stores usernames in lower case
            if (candidate.get("username") or "").lower() == username:
                return candidate
        raise KeycloakError(f"Failed to retrieve user '{user.get('username')}' after creation")

    def update(self, realm: str, user: Optional[dict]) -> dict:
        """Update a user and return its stored state.

        Raises:
            MissingArgumentError: If user or its id is absent
            KeycloakAPIError: If Keycloak does not answer 204
        """
        require(user, "user")
        require_field(user, "id", "user")
        self.client.put(self._path(realm, user["id"]), json=user)
        return self.find(realm, user["id"])

    def remove(self, realm: str, user_id: Optional[str]) -> None:
        """Delete a user.

        Raises:
            MissingArgumentError: If user_id is absent
        """
        require(user_id, "userId")
        self.client.delete(self._path(realm, user_id))
        logger.info("User %s removed", user_id)

    def reset_password(self, realm: str, user_id: Optional[str], credential: Optional[dict]) -> None:
        """Set a user's password.

        Args:
            realm: Realm name
            user_id: User ID
            credential: Credential representation, e.g.
                ``{"type": "password", "value": "...", "temporary": True}``
        """
        require(user_id, "userId")
        require(credential, "credential")
        self.client.put(f"{self._path(realm, user_id)}/reset-password", json=credential)
        logger.info("Password reset for user %s", user_id)


class UserGroupService:
    """Group memberships of a user."""

    def __init__(self, client: KeycloakClient):
        self.client = client

    def _path(self, realm: str, user_id: Optional[str]) -> str:
        require(user_id, "userId")
        return f"/admin/realms/{segment(realm)}/users/{segment(user_id)}/groups"

    def find(self, realm: str, user_id: Optional[str]) -> list[dict]:
        """Return the groups a user belongs to."""
        return self.client.json(self.client.get(self._path(realm, user_id))) or []

    def join(self, realm: str, user_id: Optional[str], group_id: Optional[str]) -> None:
        """Add a user to a group.

        Raises:
            MissingArgumentError: If user_id or group_id is absent
        """
        path = self._path(realm, user_id)
        require(group_id, "groupId")
        self.client.put(f"{path}/{segment(group_id)}")
        logger.info("User %s joined group %s", user_id, group_id)

    def leave(self, realm: str, user_id: Optional[str], group_id: Optional[str]) -> None:
        """Remove a user from a group."""
        path = self._path(realm, user_id)
        require(group_id, "groupId")
        self.client.delete(f"{path}/{segment(group_id)}")
        logger.info("User %s left group %s", user_id, group_id)
