"""
Kafka client authentication resolution.

Turns a declarative client authentication descriptor into the secret
volumes, volume mounts, environment variables and properties a Kafka
client container needs, and provides an Azure managed identity token
provider for SASL/OAUTHBEARER.
"""

__version__ = "0.1.0"

from client_auth.auth import (
    ManagedIdentityTokenProvider,
    OAuthBearerTokenCallback,
    ResolvedAuthentication,
    TokenHandle,
    build_env_vars,
    build_properties,
    merge_declarations,
    resolve_client_authentication,
    resolve_jmx_authenticated,
    resolve_mounts,
    resolve_volumes,
    validate,
    validate_client_authentication,
)
from client_auth.config import ResolverConfig, load_config
from client_auth.errors import ClientAuthError
from client_auth.models import ClientAuthentication

__all__ = [
    "__version__",
    "ClientAuthentication",
    "ClientAuthError",
    "ResolverConfig",
    "load_config",
    "validate",
    "validate_client_authentication",
    "resolve_volumes",
    "resolve_mounts",
    "merge_declarations",
    "build_properties",
    "build_env_vars",
    "resolve_client_authentication",
    "ResolvedAuthentication",
    "resolve_jmx_authenticated",
    "ManagedIdentityTokenProvider",
    "OAuthBearerTokenCallback",
    "TokenHandle",
]
