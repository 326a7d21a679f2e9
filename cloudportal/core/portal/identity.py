"""Client-credential token acquisition for the Cloudportal API."""
from __future__ import annotations

from azure.core.exceptions import AzureError
from azure.identity import ClientSecretCredential

from .exceptions import IdentityError


class TokenProvider:
    """Fetch bearer tokens from Entra ID with the client credentials flow.

    The scope is derived from the tenant ID (``{tenant_id}/.default``), which is
    what the Cloudportal API registration expects.

    Usage:
        tokens = TokenProvider(tenant_id, client_id, client_secret)
        token = tokens.get_token()
    """

    def __init__(self, tenant_id: str, client_id: str, client_secret: str):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.scope = f"{tenant_id}/.default"
        try:
            self._credential = ClientSecretCredential(tenant_id, client_id, client_secret)
        except ValueError as exc:
            raise IdentityError(f"invalid client credentials: {exc}") from exc

    def get_token(self) -> str:
        """Return a bearer token for the tenant scope.

        Raises:
            IdentityError: If the identity provider rejects the request
        """
        try:
            access_token = self._credential.get_token(self.scope)
        except (AzureError, ValueError) as exc:
            raise IdentityError(f"failed to obtain a token: {exc}") from exc
        if not access_token or not access_token.token:
            raise IdentityError("failed to obtain a token: empty token returned")
        return access_token.token
