"""Resolve a client authentication descriptor into everything a pod needs."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from client_auth.auth.properties import EnvVarDeclaration, EnvVarNamer, build_env_vars, build_properties
from client_auth.auth.validation import validate_client_authentication
from client_auth.auth.volumes import MountDeclaration, VolumeDeclaration, resolve_mounts, resolve_volumes
from client_auth.logging.context import set_log_context
from client_auth.models import ClientAuthentication

if TYPE_CHECKING:
    from client_auth.config import ResolverConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedAuthentication:
    """Validation warning plus the artifacts derived from one descriptor."""

    warning: str = ""
    volumes: list[VolumeDeclaration] = field(default_factory=list)
    mounts: list[MountDeclaration] = field(default_factory=list)
    env_vars: list[EnvVarDeclaration] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)


def resolve_client_authentication(
    authentication: Optional[ClientAuthentication],
    tls_enabled: bool,
    config: Optional["ResolverConfig"],
    env_var_namer: EnvVarNamer,
) -> ResolvedAuthentication:
    """
    Validate a descriptor, then derive its volumes, mounts, env vars and properties.

    Passing None for config uses the process-wide config from get_config().

    Raises:
        MissingFieldError: If the descriptor lacks required fields
    """
    auth_type = authentication.TYPE if authentication is not None else "none"
    set_log_context(auth_type=auth_type)

    if config is None:
        from client_auth.config import get_config

        config = get_config()

    warning = validate_client_authentication(authentication, tls_enabled)

    resolved = ResolvedAuthentication(
        warning=warning,
        volumes=resolve_volumes(
            authentication,
            config.volume_name_prefix,
            oauth_volume_name_prefix=config.oauth_volume_name_prefix,
            is_openshift=config.is_openshift,
            create_oauth_secret_volumes=config.create_oauth_secret_volumes,
        ),
        mounts=resolve_mounts(
            authentication,
            config.mount_paths,
            config.volume_name_prefix,
            oauth_volume_name_prefix=config.oauth_volume_name_prefix,
            mount_oauth_secret_volumes=config.create_oauth_secret_volumes,
        ),
        env_vars=build_env_vars(authentication, env_var_namer),
        properties=build_properties(authentication),
    )

    logger.debug(
        "Resolved client authentication",
        extra={
            "auth_type": auth_type,
            "volume_count": len(resolved.volumes),
            "mount_count": len(resolved.mounts),
            "env_var_count": len(resolved.env_vars),
        },
    )
    return resolved


__all__ = ["ResolvedAuthentication", "resolve_client_authentication"]
