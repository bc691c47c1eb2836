"""Low-level HTTP client for Keycloak Admin API.

Handles authentication, token management, and HTTP operations.
"""
from __future__ import annotations
import logging
import os
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import jwt
import requests

from .exceptions import KeycloakAPIError, KeycloakAuthError

REQUEST_TIMEOUT = 5
DEFAULT_TOKEN_LIFETIME = 60
REFRESH_MARGIN = timedelta(seconds=10)

logger = logging.getLogger(__name__)


class KeycloakClient:
    """HTTP client for Keycloak Admin API holding the connection's credentials.

    The base URL and the current bearer token are plain attributes of the
    instance; every service bound to this client reads them on each request.

    Features:
    - Automatic token refresh when expired (re-runs the remembered login)
    - Exact status code matching per call
    - Support for both admin and service account authentication

    Usage:
        client = KeycloakClient("http://keycloak:8080")
        client.authenticate_admin("admin", "password")
        resp = client.get("/admin/realms/demo/users")
        users = client.json(resp)
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = REQUEST_TIMEOUT, verify: bool = True):
        """Initialize Keycloak client.

        Args:
            base_url: Keycloak base URL (defaults to KEYCLOAK_URL env var)
            timeout: Per-request timeout in seconds; None disables it
            verify: Verify TLS certificates
        """
        self.base_url = (base_url or os.environ.get("KEYCLOAK_URL", "http://localhost:8080")).rstrip("/")
        self.timeout = timeout
        self.verify = verify
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._auth_method: Optional[str] = None
        self._auth_params: Dict[str, Any] = {}

    @property
    def token(self) -> Optional[str]:
        """Current bearer token, or None before authentication."""
        return self._token

    @property
    def token_expires_at(self) -> Optional[datetime]:
        return self._token_expires_at

    def authenticate_admin(
        self,
        username: str,
        password: str,
        realm: str = "master",
        client_id: str = "admin-cli",
    ) -> str:
        """Authenticate as admin user and store credentials for auto-refresh.

        Args:
            username: Admin username
            password: Admin password
            realm: Authentication realm (default: master)
            client_id: Public client used for the password grant

        Returns:
            Access token
        """
        self._auth_method = "admin"
        self._auth_params = {
            "username": username,
            "password": password,
            "realm": realm,
            "client_id": client_id,
        }
        return self._login()

    def authenticate_service_account(self, auth_realm: str, client_id: str, client_secret: str) -> str:
        """Authenticate as service account and store credentials for auto-refresh.

        Args:
            auth_realm: Realm where service account client exists
            client_id: Service account client ID
            client_secret: Service account client secret

        Returns:
            Access token
        """
        self._auth_method = "service_account"
        self._auth_params = {
            "auth_realm": auth_realm,
            "client_id": client_id,
            "client_secret": client_secret,
        }
        return self._login()

    def set_token(self, token: str, expires_in: Optional[int] = None) -> None:
        """Install a token obtained elsewhere.

        Args:
            token: Access token
            expires_in: Lifetime in seconds, used when the token carries no exp claim
        """
        self._token = token
        self._token_expires_at = _token_expiry(token, expires_in)

    def _login(self) -> str:
        if self._auth_method == "admin":
            payload = self._get_admin_token(
                self._auth_params["username"],
                self._auth_params["password"],
                self._auth_params["realm"],
                self._auth_params["client_id"],
            )
        elif self._auth_method == "service_account":
            payload = self._get_service_account_token(
                self._auth_params["auth_realm"],
                self._auth_params["client_id"],
                self._auth_params["client_secret"],
            )
        else:
            raise KeycloakAuthError(401, "No credentials to authenticate with", "")
        self.set_token(payload["access_token"], payload.get("expires_in"))
        logger.info("Authenticated against %s (%s)", self.base_url, self._auth_method)
        return self._token

    def _ensure_authenticated(self) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._token or not self._token_expires_at:
            raise KeycloakAuthError(
                401, "Not authenticated - call authenticate_admin or authenticate_service_account first", ""
            )

        # Refresh if token expired or expiring soon
        if self._auth_method and datetime.now() >= self._token_expires_at - REFRESH_MARGIN:
            logger.debug("Access token expiring, logging in again")
            self._login()

    def get(self, path: str, params: Optional[Dict] = None, expected: int = 200, **kwargs) -> requests.Response:
        """Execute GET request with automatic authentication.

        Args:
            path: API endpoint path (e.g., "/admin/realms/demo/users")
            params: Query parameters
            expected: Status code that counts as success
            **kwargs: Additional arguments for requests.request

        Returns:
            Response object

        Raises:
            KeycloakAPIError: When the status differs from ``expected``
            requests.RequestException: When the request cannot be made
        """
        return self._send("GET", path, expected, params=params, **kwargs)

    def post(
        self,
        path: str,
        json: Optional[Any] = None,
        data: Optional[Dict] = None,
        expected: int = 201,
        **kwargs,
    ) -> requests.Response:
        """Execute POST request with automatic authentication.

        Args:
            path: API endpoint path
            json: JSON payload
            data: Form data payload
            expected: Status code that counts as success
            **kwargs: Additional arguments for requests.request

        Returns:
            Response object

        Raises:
            KeycloakAPIError: When the status differs from ``expected``
            requests.RequestException: When the request cannot be made
        """
        return self._send("POST", path, expected, json=json, data=data, **kwargs)

    def put(self, path: str, json: Optional[Any] = None, expected: int = 204, **kwargs) -> requests.Response:
        """Execute PUT request with automatic authentication.

        Args:
            path: API endpoint path
            json: JSON payload
            expected: Status code that counts as success
            **kwargs: Additional arguments for requests.request

        Returns:
            Response object
        """
        return self._send("PUT", path, expected, json=json, **kwargs)

    def delete(self, path: str, expected: int = 204, **kwargs) -> requests.Response:
        """Execute DELETE request with automatic authentication."""
        return self._send("DELETE", path, expected, **kwargs)

    def _send(self, method: str, path: str, expected: int, **kwargs) -> requests.Response:
        self._ensure_authenticated()
        url = f"{self.base_url}{path}"
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {self._token}"

        resp = requests.request(
            method, url, headers=headers, timeout=self.timeout, verify=self.verify, **kwargs
        )
        logger.debug("%s %s -> %s", method, path, resp.status_code)
        self._handle_error(resp, expected)
        return resp

    @staticmethod
    def json(resp: requests.Response) -> Any:
        """Decode a response body; empty bodies decode to None."""
        return _body(resp)

    @staticmethod
    def location_id(resp: requests.Response) -> Optional[str]:
        """Return the trailing id of the Location header set by create endpoints."""
        location = resp.headers.get("Location", "").rstrip("/")
        if not location:
            return None
        return location.rsplit("/", 1)[-1]

    def _get_admin_token(
        self, username: str, password: str, realm: str = "master", client_id: str = "admin-cli"
    ) -> Dict[str, Any]:
        """Obtain an admin token via direct access grant."""
        data = {
            "grant_type": "password",
            "client_id": client_id,
            "username": username,
            "password": password,
        }
        return self._request_token(realm, data)

    def _get_service_account_token(self, auth_realm: str, client_id: str, client_secret: str) -> Dict[str, Any]:
        """Fetch a service account token using client credentials flow."""
        data = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        }
        return self._request_token(auth_realm, data)

    def _request_token(self, realm: str, data: Dict[str, str]) -> Dict[str, Any]:
        url = f"{self.base_url}/realms/{realm}/protocol/openid-connect/token"
        resp = requests.request("POST", url, data=data, timeout=self.timeout, verify=self.verify)
        if resp.status_code != 200:
            logger.warning("Token request to realm '%s' failed with status %s", realm, resp.status_code)
            raise KeycloakAuthError(resp.status_code, _body(resp), url)
        return resp.json()

    def _handle_error(self, resp: requests.Response, expected: int) -> None:
        """Centralized error handling for HTTP responses.

        Args:
            resp: Response object to check
            expected: The only status code treated as success

        Raises:
            KeycloakAPIError: If response status is not the expected one
        """
        if resp.status_code != expected:
            logger.warning("Unexpected status %s (wanted %s) from %s", resp.status_code, expected, resp.url)
            raise KeycloakAPIError(resp.status_code, _body(resp), resp.url)


def _body(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _token_expiry(token: str, expires_in: Optional[int]) -> datetime:
    """Read the exp claim of a JWT access token without verifying it."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        claims = {}
    exp = claims.get("exp")
    if isinstance(exp, (int, float)):
        return datetime.fromtimestamp(exp)
    return datetime.now() + timedelta(seconds=expires_in or DEFAULT_TOKEN_LIFETIME)


# ─────────────────────────────────────────────────────────────────────────────
# Standalone helpers
# ─────────────────────────────────────────────────────────────────────────────
def get_admin_token(kc_url: str, username: str, password: str, realm: str = "master") -> str:
    """Obtain an admin token via direct access grant on the specified realm."""
    client = KeycloakClient(kc_url)
    return client._get_admin_token(username, password, realm)["access_token"]


def get_service_account_token(kc_url: str, auth_realm: str, client_id: str, client_secret: str) -> str:
    """Fetch a service account token using client credentials flow."""
    client = KeycloakClient(kc_url)
    return client._get_service_account_token(auth_realm, client_id, client_secret)["access_token"]


def create_client_with_token(kc_url: str, token: str, expires_in: int = 3600) -> KeycloakClient:
    """Create a pre-authenticated KeycloakClient from a token obtained elsewhere.

    Args:
        kc_url: Keycloak base URL
        token: Pre-obtained access token
        expires_in: Token validity in seconds when the token has no exp claim

    Returns:
        KeycloakClient instance with token pre-set
    """
    client = KeycloakClient(kc_url)
    client.set_token(token, expires_in)
    return client
