"""Provider settings with environment variable, Docker secrets and Key Vault integration."""
from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from cloudportal.core.portal.exceptions import ConfigurationError

DEFAULT_DEBUG_LOG = "provider-debug.log"

# Provider block key -> ProviderConfig field
PROVIDER_BLOCK_KEYS = {
    "api_key": "api_key",
    "base_url": "base_url",
    "debug_info": "debug_info",
    "clientID": "client_id",
    "clientSecret": "client_secret",
    "tenantID": "tenant_id",
}


def _log(message: str) -> None:
    print(f"[settings] {message}", file=sys.stderr)


def _as_timeout(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"request_timeout must be a number, got {value!r}") from exc


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """Read a provider credential mounted under /run/secrets.

    Used for the Entra ID client secret (``azure_client_secret``) and the portal
    API key (``cloudportal_api_key``). A mounted file wins over ``env_var``;
    Key Vault is consulted by ``load_settings`` only when both are empty.
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                _log(f"✓ Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            _log(f"✗ Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            _log(f"✓ Loaded {env_var} from environment (fallback)")
            return secret_value

    return None


def _load_secret_from_keyvault(secret_name: str) -> str | None:
    """Fetch a secret from Azure Key Vault using the ambient Azure identity."""
    from azure.core.exceptions import AzureError
    from azure.identity import DefaultAzureCredential
    from azure.keyvault.secrets import SecretClient

    vault_name = os.environ.get("AZURE_KEY_VAULT_NAME")
    if not vault_name:
        raise ConfigurationError("AZURE_KEY_VAULT_NAME required when CLOUDPORTAL_USE_KEYVAULT=true")

    vault_uri = f"https://{vault_name}.vault.azure.net"
    secret_client = SecretClient(vault_url=vault_uri, credential=DefaultAzureCredential())
    try:
        secret = secret_client.get_secret(secret_name)
    except AzureError as exc:
        _log(f"✗ Failed to load secret '{secret_name}' from Key Vault: {exc}")
        return None
    _log(f"✓ Loaded {secret_name} from Key Vault")
    return secret.value


@dataclass(frozen=True)
class ProviderConfig:
    """Typed provider configuration, validated at construction."""
    base_url: str
    api_key: str
    tenant_id: str
    client_id: str
    client_secret: str
    debug_info: bool = False
    debug_log_path: str = DEFAULT_DEBUG_LOG
    request_timeout: Optional[float] = None

    def __post_init__(self):
        if not self.api_key or not self.base_url:
            raise ConfigurationError("API key and base URL must be provided")
        for name in ("tenant_id", "client_id", "client_secret"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} must be provided")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], **overrides: Any) -> "ProviderConfig":
        """Build a config from a provider block (``clientID``, ``tenantID``, ...)."""
        values: dict[str, Any] = {}
        for key, field_name in PROVIDER_BLOCK_KEYS.items():
            if key in raw:
                values[field_name] = raw[key]
            elif field_name in raw:
                values[field_name] = raw[field_name]
        for field_name in ("debug_log_path", "request_timeout"):
            if field_name in raw:
                values[field_name] = raw[field_name]
        values.update(overrides)

        return cls(
            base_url=str(values.get("base_url") or ""),
            api_key=str(values.get("api_key") or ""),
            tenant_id=str(values.get("tenant_id") or ""),
            client_id=str(values.get("client_id") or ""),
            client_secret=str(values.get("client_secret") or ""),
            debug_info=_as_bool(values.get("debug_info")),
            debug_log_path=str(values.get("debug_log_path") or DEFAULT_DEBUG_LOG),
            request_timeout=_as_timeout(values.get("request_timeout")),
        )


def load_provider_file(path: str | Path) -> ProviderConfig:
    """Load a provider block from a YAML (or JSON) file."""
    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"{path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path}: provider block must be a mapping")
    # Accept either the bare block or {"provider": {...}}
    block = raw.get("provider", raw)
    return ProviderConfig.from_mapping(block)


def load_settings() -> ProviderConfig:
    """Load provider settings from environment, /run/secrets, and Azure Key Vault."""
    use_keyvault = os.environ.get("CLOUDPORTAL_USE_KEYVAULT", "false").lower() == "true"

    client_secret = _load_secret_from_file("azure_client_secret", "AZURE_CLIENT_SECRET")
    if not client_secret and use_keyvault:
        client_secret = _load_secret_from_keyvault(
            os.environ.get("AZURE_SECRET_CLIENT_SECRET", "cloudportal-client-secret")
        )

    api_key = _load_secret_from_file("cloudportal_api_key", "CLOUDPORTAL_API_KEY")
    if not api_key and use_keyvault:
        api_key = _load_secret_from_keyvault(
            os.environ.get("AZURE_SECRET_API_KEY", "cloudportal-api-key")
        )

    config = ProviderConfig(
        base_url=os.environ.get("CLOUDPORTAL_BASE_URL", ""),
        api_key=api_key or "",
        tenant_id=os.environ.get("AZURE_TENANT_ID", ""),
        client_id=os.environ.get("AZURE_CLIENT_ID", ""),
        client_secret=client_secret or "",
        debug_info=_as_bool(os.environ.get("CLOUDPORTAL_DEBUG", "false")),
        debug_log_path=os.environ.get("CLOUDPORTAL_DEBUG_LOG", DEFAULT_DEBUG_LOG),
        request_timeout=_as_timeout(os.environ.get("CLOUDPORTAL_REQUEST_TIMEOUT")),
    )

    _log(f"base_url={config.base_url}; tenant={config.tenant_id}; debug={config.debug_info}")
    return config
