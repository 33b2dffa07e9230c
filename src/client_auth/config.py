"""Client authentication resolver configuration from YAML file.

Loads the ``client_auth:`` section of a YAML file:

    client_auth:
      volume_name_prefix: ""
      oauth_volume_name_prefix: oauth-certs
      is_openshift: ${IS_OPENSHIFT:-false}
      create_oauth_secret_volumes: false
      mount_paths:
        tls: /opt/kafka/client-certs/
        password: /opt/kafka/client-password/
        oauth_certs: /opt/kafka/oauth-certs
        oauth_secrets: /opt/kafka/oauth-secrets/

Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from client_auth.auth.volumes import MountPaths
from client_auth.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "CLIENT_AUTH_CONFIG"
DEFAULT_CONFIG_FILE = Path("config") / "client_auth.yaml"

DEFAULT_OAUTH_VOLUME_NAME_PREFIX = "oauth-certs"
DEFAULT_TLS_MOUNT_PATH = "/opt/kafka/client-certs/"
DEFAULT_PASSWORD_MOUNT_PATH = "/opt/kafka/client-password/"
DEFAULT_OAUTH_CERTS_MOUNT_PATH = "/opt/kafka/oauth-certs"
DEFAULT_OAUTH_SECRETS_MOUNT_PATH = "/opt/kafka/oauth-secrets/"

_TRUE_VALUES = ("true", "1", "yes", "on")


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _as_bool(value: Any) -> bool:
    # Expanded ${VAR} values arrive as strings
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def get_config_value(env_var: str, yaml_value: Any, default: Any = "") -> Any:
    """Return the environment variable if set and non-empty, else the YAML value, else default."""
    return os.getenv(env_var) or yaml_value or default


def _default_mount_paths() -> MountPaths:
    return MountPaths(
        tls=DEFAULT_TLS_MOUNT_PATH,
        password=DEFAULT_PASSWORD_MOUNT_PATH,
        oauth_certs=DEFAULT_OAUTH_CERTS_MOUNT_PATH,
        oauth_secrets=DEFAULT_OAUTH_SECRETS_MOUNT_PATH,
    )


@dataclass
class ResolverConfig:
    """Settings shared by every resolution for one kind of component.

    Configuration structure:
        client_auth:
          volume_name_prefix: ""            # Prefix for volumes named after a secret
          oauth_volume_name_prefix: ...     # Prefix for OAuth trusted certificate volumes
          is_openshift: false               # Leave secret volume mode unset
          create_oauth_secret_volumes: ...  # Also mount OAuth client secret and tokens
          mount_paths: {...}                # Base paths per kind of secret
    """

    volume_name_prefix: str = ""
    oauth_volume_name_prefix: str = DEFAULT_OAUTH_VOLUME_NAME_PREFIX
    is_openshift: bool = False
    create_oauth_secret_volumes: bool = False
    mount_paths: MountPaths = field(default_factory=_default_mount_paths)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If a prefix or mount path is unusable
        """
        if not self.oauth_volume_name_prefix:
            raise ConfigurationError("client_auth: oauth_volume_name_prefix must not be empty")

        for name in ("tls", "password", "oauth_certs"):
            path = getattr(self.mount_paths, name)
            if not path:
                raise ConfigurationError(f"client_auth.mount_paths: {name} must not be empty")
            if not path.startswith("/"):
                raise ConfigurationError(
                    f"client_auth.mount_paths: {name} must be an absolute path, got '{path}'"
                )

        if self.create_oauth_secret_volumes and not self.mount_paths.oauth_secrets:
            raise ConfigurationError(
                "client_auth.mount_paths: oauth_secrets is required when "
                "create_oauth_secret_volumes is enabled"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolverConfig":
        mount_paths = data.get("mount_paths", {}) or {}
        return cls(
            volume_name_prefix=data.get("volume_name_prefix", "") or "",
            oauth_volume_name_prefix=data.get(
                "oauth_volume_name_prefix", DEFAULT_OAUTH_VOLUME_NAME_PREFIX
            ),
            is_openshift=_as_bool(data.get("is_openshift", False)),
            create_oauth_secret_volumes=_as_bool(data.get("create_oauth_secret_volumes", False)),
            mount_paths=MountPaths(
                tls=mount_paths.get("tls", DEFAULT_TLS_MOUNT_PATH),
                password=mount_paths.get("password", DEFAULT_PASSWORD_MOUNT_PATH),
                oauth_certs=mount_paths.get("oauth_certs", DEFAULT_OAUTH_CERTS_MOUNT_PATH),
                oauth_secrets=mount_paths.get("oauth_secrets", DEFAULT_OAUTH_SECRETS_MOUNT_PATH),
            ),
        )


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ResolverConfig:
    """Load resolver configuration from a YAML file.

    The path defaults to $CLIENT_AUTH_CONFIG, then config/client_auth.yaml.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file has no client_auth: section
        ConfigurationError: If the loaded values are invalid
    """
    if config_path is None:
        config_path = Path(get_config_value(CONFIG_PATH_ENV_VAR, None, DEFAULT_CONFIG_FILE))

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from file: {config_path}")
    yaml_data = _expand_env_vars(load_yaml(config_path))

    if "client_auth" not in yaml_data:
        raise ValueError("Invalid config file: missing 'client_auth:' section")

    section = yaml_data["client_auth"] or {}
    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        section = _deep_merge(section, overrides)

    config = ResolverConfig.from_dict(section)
    config.validate()
    logger.debug(
        "Configuration loaded",
        extra={"is_openshift": config.is_openshift},
    )
    return config


_resolver_config: Optional[ResolverConfig] = None


def get_config() -> ResolverConfig:
    """Get or load the singleton resolver config instance."""
    global _resolver_config
    if _resolver_config is None:
        _resolver_config = load_config()
    return _resolver_config


def set_config(config: ResolverConfig) -> None:
    """Set the singleton resolver config instance (useful for testing)."""
    global _resolver_config
    _resolver_config = config


def reset_config() -> None:
    """Reset the singleton config instance (forces reload on next get_config() call)."""
    global _resolver_config
    _resolver_config = None


__all__ = [
    "ResolverConfig",
    "load_yaml",
    "load_config",
    "get_config_value",
    "get_config",
    "set_config",
    "reset_config",
]
