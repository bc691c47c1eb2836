import pytest

from kcadmin.core.keycloak import AuthorizationService, ClientRoleService
from kcadmin.core.keycloak.exceptions import KeycloakAPIError, KeycloakError, MissingArgumentError

CLIENTS = "/admin/realms/demo/clients"
CLIENT_UUID = "2b8f6e1c-4a0d-4c83-8f0e-5d6f7a8b9c0d"


# ─────────────────────────────────────────────────────────────────────────────
# Realms
# ─────────────────────────────────────────────────────────────────────────────
def test_realm_create_reads_back_by_name(fake_keycloak, admin):
    fake_keycloak.add("POST", "/admin/realms", status=201)
    fake_keycloak.add("GET", "/admin/realms/demo", payload={"realm": "demo", "enabled": True})

    assert admin.realms.create({"realm": "demo", "enabled": True}) == {"realm": "demo", "enabled": True}


def test_realm_create_requires_name(fake_keycloak, admin):
    with pytest.raises(MissingArgumentError):
        admin.realms.create(None)
    with pytest.raises(MissingArgumentError, match="realm.realm"):
        admin.realms.create({"enabled": True})
    assert fake_keycloak.calls == []


def test_realm_find_all_and_one(fake_keycloak, admin):
    fake_keycloak.add("GET", "/admin/realms", payload=[{"realm": "master"}, {"realm": "demo"}])
    fake_keycloak.add("GET", "/admin/realms/master", payload={"realm": "master"})

    assert len(admin.realms.find()) == 2
    assert admin.realms.find("master") == {"realm": "master"}


def test_realm_update_follows_rename(fake_keycloak, admin):
    fake_keycloak.add("PUT", "/admin/realms/demo", status=204)
    fake_keycloak.add("GET", "/admin/realms/demo2", payload={"realm": "demo2"})

    assert admin.realms.update("demo", {"realm": "demo2"}) == {"realm": "demo2"}


def test_realm_remove(fake_keycloak, admin):
    fake_keycloak.add("DELETE", "/admin/realms/demo", status=204)

    admin.realms.remove("demo")
    with pytest.raises(MissingArgumentError):
        admin.realms.remove(None)
    assert len(fake_keycloak.calls) == 1


# ─────────────────────────────────────────────────────────────────────────────
# Clients
# ─────────────────────────────────────────────────────────────────────────────
def test_clients_expose_roles_and_authorizations(admin):
    assert isinstance(admin.clients.roles, ClientRoleService)
    assert isinstance(admin.clients.authorizations, AuthorizationService)
    assert admin.clients.authorizations.permissions.client is admin.client


def test_client_find_by_client_id(fake_keycloak, admin):
    fake_keycloak.add("GET", CLIENTS, payload=[{"id": CLIENT_UUID, "clientId": "flask-app"}])

    found = admin.clients.find("demo", clientId="flask-app")

    assert found[0]["id"] == CLIENT_UUID
    assert fake_keycloak.calls[0].kwargs["params"] == {"clientId": "flask-app"}


def test_client_create_update_remove(fake_keycloak, admin):
    rep = {"id": CLIENT_UUID, "clientId": "flask-app", "publicClient": False}
    fake_keycloak.add("POST", CLIENTS, status=201, headers={"Location": f"{fake_keycloak.base_url}{CLIENTS}/{CLIENT_UUID}"})
    fake_keycloak.add("GET", f"{CLIENTS}/{CLIENT_UUID}", payload=rep)
    fake_keycloak.add("PUT", f"{CLIENTS}/{CLIENT_UUID}", status=204)
    fake_keycloak.add("DELETE", f"{CLIENTS}/{CLIENT_UUID}", status=204)

    assert admin.clients.create("demo", {"clientId": "flask-app"}) == rep
    assert admin.clients.update("demo", rep) == rep
    admin.clients.remove("demo", CLIENT_UUID)

    assert [call.method for call in fake_keycloak.calls] == ["POST", "GET", "PUT", "GET", "DELETE"]


def test_client_update_requires_id(fake_keycloak, admin):
    with pytest.raises(MissingArgumentError):
        admin.clients.update("demo", {"clientId": "flask-app"})
    assert fake_keycloak.calls == []


# ─────────────────────────────────────────────────────────────────────────────
# Roles
# ─────────────────────────────────────────────────────────────────────────────
def test_realm_role_create_and_rename(fake_keycloak, admin):
    fake_keycloak.add("POST", "/admin/realms/demo/roles", status=201)
    fake_keycloak.add("GET", "/admin/realms/demo/roles/analyst", payload={"id": "r1", "name": "analyst"})
    fake_keycloak.add("PUT", "/admin/realms/demo/roles/analyst", status=204)
    fake_keycloak.add("GET", "/admin/realms/demo/roles/senior%20analyst", payload={"id": "r1", "name": "senior analyst"})

    assert admin.roles.create("demo", {"name": "analyst"})["id"] == "r1"
    renamed = admin.roles.update("demo", {"name": "senior analyst"}, role_name="analyst")

    assert renamed["name"] == "senior analyst"


def test_realm_role_create_conflict(fake_keycloak, admin):
    fake_keycloak.add("POST", "/admin/realms/demo/roles", status=409,
                      payload={"errorMessage": "Role with name analyst already exists"})

    with pytest.raises(KeycloakAPIError):
        admin.roles.create("demo", {"name": "analyst"})


def test_realm_role_remove_requires_name(fake_keycloak, admin):
    with pytest.raises(MissingArgumentError, match="roleName"):
        admin.roles.remove("demo", "")
    assert fake_keycloak.calls == []


def test_client_roles(fake_keycloak, admin):
    roles = f"{CLIENTS}/{CLIENT_UUID}/roles"
    fake_keycloak.add("GET", roles, payload=[{"name": "viewer"}])
    fake_keycloak.add("POST", roles, status=201)
    fake_keycloak.add("GET", f"{roles}/editor", payload={"name": "editor"})
    fake_keycloak.add("DELETE", f"{roles}/editor", status=204)

    assert admin.clients.roles.find("demo", CLIENT_UUID) == [{"name": "viewer"}]
    assert admin.clients.roles.create("demo", CLIENT_UUID, {"name": "editor"}) == {"name": "editor"}
    admin.clients.roles.remove("demo", CLIENT_UUID, "editor")


def test_client_roles_require_client(fake_keycloak, admin):
    with pytest.raises(MissingArgumentError, match="id is missing"):
        admin.clients.roles.find("demo", None)
    assert fake_keycloak.calls == []


def test_client_create_without_location_looks_client_up_by_client_id(fake_keycloak, admin):
    fake_keycloak.add("POST", CLIENTS, status=201)
    fake_keycloak.add("GET", CLIENTS, payload=[{"id": "c-1", "clientId": "reports"}])

    created = admin.clients.create("demo", {"clientId": "reports"})

    assert created == {"id": "c-1", "clientId": "reports"}
    assert fake_keycloak.requests_to("GET", CLIENTS)[0].kwargs["params"] == {"clientId": "reports"}


def test_client_create_without_location_and_no_match_raises(fake_keycloak, admin):
    fake_keycloak.add("POST", CLIENTS, status=201)
    fake_keycloak.add("GET", CLIENTS, payload=[])

    with pytest.raises(KeycloakError, match="Failed to retrieve client 'reports' after creation"):
        admin.clients.create("demo", {"clientId": "reports"})
