"""
Client authentication resolvers.

Provides:
- Validation of authentication descriptors
- Secret volumes and volume mounts
- Authentication properties and environment variables
- Azure managed identity token provider for SASL/OAUTHBEARER
- JMX authentication
"""

from client_auth.auth.jmx import resolve_jmx_authenticated
from client_auth.auth.k8s import create_secret_volume, to_env_vars, to_volume_mounts
from client_auth.auth.managed_identity import (
    TOKEN_ACQUISITION_TIMEOUT_SECONDS,
    create_managed_identity_credential,
    ManagedIdentityTokenProvider,
    OAuthBearerTokenCallback,
    TokenHandle,
)
from client_auth.auth.properties import EnvVarDeclaration, build_env_vars, build_properties
from client_auth.auth.resolver import ResolvedAuthentication, resolve_client_authentication
from client_auth.auth.validation import (
    TLS_NOT_ENABLED_WARNING,
    ValidationResult,
    validate,
    validate_client_authentication,
)
from client_auth.auth.volumes import (
    MountDeclaration,
    MountPaths,
    VolumeDeclaration,
    merge_declarations,
    resolve_mounts,
    resolve_volumes,
)

__all__ = [
    # Validation
    "ValidationResult",
    "TLS_NOT_ENABLED_WARNING",
    "validate",
    "validate_client_authentication",
    # Volumes and mounts
    "VolumeDeclaration",
    "MountDeclaration",
    "MountPaths",
    "merge_declarations",
    "resolve_volumes",
    "resolve_mounts",
    # Properties and env vars
    "EnvVarDeclaration",
    "build_properties",
    "build_env_vars",
    # Kubernetes objects
    "create_secret_volume",
    "to_volume_mounts",
    "to_env_vars",
    # Token provider
    "TOKEN_ACQUISITION_TIMEOUT_SECONDS",
    "create_managed_identity_credential",
    "TokenHandle",
    "OAuthBearerTokenCallback",
    "ManagedIdentityTokenProvider",
    # Facade
    "ResolvedAuthentication",
    "resolve_client_authentication",
    # JMX
    "resolve_jmx_authenticated",
]
