"""Keycloak Admin API client library.

This package exposes the Admin REST API as service objects bound to one
authenticated connection.

Architecture:
- client.py: HTTP client with authentication, auto-refresh and status checks
- authorizations.py: Resource server resources, policies and permissions
- realm.py: Realm and client management
- roles.py: Realm roles and client roles
- groups.py: Groups and group members
- users.py: Users and their group memberships
- admin.py: KeycloakAdmin facade and connect()
- exceptions.py: Typed exceptions for error handling

Usage:
    from kcadmin.core.keycloak import KeycloakClient, KeycloakAdmin

    client = KeycloakClient("http://keycloak:8080")
    client.authenticate_admin("admin", "password")

    admin = KeycloakAdmin(client)
    admin.clients.authorizations.policies.find("demo", client_uuid)
"""
from .client import (
    KeycloakClient,
    get_admin_token,
    get_service_account_token,
    create_client_with_token,
    REQUEST_TIMEOUT,
)
from .exceptions import (
    KeycloakError,
    KeycloakAPIError,
    KeycloakAuthError,
    MissingArgumentError,
)
from .authorizations import (
    AuthorizationService,
    AuthorizationResourceService,
    AuthorizationPolicyService,
    AuthorizationPermissionService,
)
from .realm import RealmService, ClientService
from .roles import RoleService, ClientRoleService
from .groups import GroupService, GroupMemberService
from .users import UserService, UserGroupService
from .admin import KeycloakAdmin, connect

__all__ = [
    # Client
    "KeycloakClient",
    "get_admin_token",
    "get_service_account_token",
    "create_client_with_token",
    "REQUEST_TIMEOUT",

    # Exceptions
    "KeycloakError",
    "KeycloakAPIError",
    "KeycloakAuthError",
    "MissingArgumentError",

    # Services
    "AuthorizationService",
    "AuthorizationResourceService",
    "AuthorizationPolicyService",
    "AuthorizationPermissionService",
    "RealmService",
    "ClientService",
    "RoleService",
    "ClientRoleService",
    "GroupService",
    "GroupMemberService",
    "UserService",
    "UserGroupService",

    # Facade
    "KeycloakAdmin",
    "connect",
]
