"""Read-only command-line access to the Keycloak Admin API.

This module serves as a CLI wrapper around kcadmin.core.keycloak services;
every sub-command prints the result of a ``find`` call as JSON.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import requests

from kcadmin.config.settings import load_settings
from kcadmin.core.keycloak import KeycloakAdmin
from kcadmin.core.keycloak.exceptions import KeycloakError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Keycloak admin lookup helper")
    parser.add_argument("--kc-url", default=None, help="Keycloak base URL (default: KEYCLOAK_URL)")
    parser.add_argument("--auth-realm", default=None, help="Realm to log in to (default: KEYCLOAK_AUTH_REALM)")
    parser.add_argument("--client-id", default=None, help="Client used to obtain the token")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP requests")

    sub = parser.add_subparsers(dest="cmd")

    sg = sub.add_parser("groups", help="List groups or show one group")
    sg.add_argument("--realm", default=os.environ.get("KEYCLOAK_REALM", "master"))
    sg.add_argument("--id")

    sm = sub.add_parser("members", help="List the members of a group")
    sm.add_argument("--realm", default=os.environ.get("KEYCLOAK_REALM", "master"))
    sm.add_argument("--group-id", required=True)

    su = sub.add_parser("users", help="List users or show one user")
    su.add_argument("--realm", default=os.environ.get("KEYCLOAK_REALM", "master"))
    su.add_argument("--id")
    su.add_argument("--username")

    for name in ("permissions", "policies", "resources"):
        sa = sub.add_parser(name, help=f"List the authorization {name} of a client")
        sa.add_argument("--realm", default=os.environ.get("KEYCLOAK_REALM", "master"))
        sa.add_argument("--client", required=True, help="Internal id of the client")
        sa.add_argument("--type", dest="entity_type")
        sa.add_argument("--id", dest="entity_id")

    return parser


def run(admin: KeycloakAdmin, args: argparse.Namespace):
    """Dispatch a parsed command to the matching service."""
    if args.cmd == "groups":
        return admin.groups.find(args.realm, args.id)
    if args.cmd == "members":
        return admin.groups.members.find(args.realm, args.group_id)
    if args.cmd == "users":
        if args.username:
            return admin.users.find(args.realm, username=args.username, exact="true")
        return admin.users.find(args.realm, args.id)
    service = getattr(admin.clients.authorizations, args.cmd)
    return service.find(args.realm, args.client, args.entity_type, args.entity_id)


def main() -> None:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args()
    if not args.cmd:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"[kcadmin] {exc}", file=sys.stderr)
        sys.exit(2)
    if args.kc_url:
        settings.base_url = args.kc_url.rstrip("/")
    if args.auth_realm:
        settings.auth_realm = args.auth_realm
    if args.client_id:
        settings.client_id = args.client_id

    try:
        admin = KeycloakAdmin.from_settings(settings)
        result = run(admin, args)
    except (KeycloakError, ValueError) as exc:
        print(f"[kcadmin] {exc}", file=sys.stderr)
        sys.exit(1)
    except requests.RequestException as exc:
        print(f"[kcadmin] Keycloak unreachable: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
