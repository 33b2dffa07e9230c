"""
Core types and protocols shared across the client authentication package.

This module provides the error classification enum and the protocols that
describe the collaborators this package talks to (secret volume factories,
Azure token credentials) so the resolvers stay independent of any one
deployment model.
"""

from enum import Enum
from typing import Any, Mapping, Optional, Protocol


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures a caller may retry on its own schedule
                   (e.g., token endpoint did not answer within the timeout)
        AUTH: Credential source refused or failed to produce a token
        PERMANENT: Non-retriable failures that won't succeed on retry
                   (e.g., missing descriptor fields, bad bootstrap config)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class SecretVolumeFactory(Protocol):
    """
    Protocol for turning a secret volume request into a platform volume.

    The default implementation builds a ``kubernetes.client.V1Volume``;
    callers targeting another deployment model supply their own.
    """

    def __call__(
        self,
        name: str,
        secret_name: str,
        items: Optional[Mapping[str, str]],
        is_openshift: bool,
    ) -> Any:
        """
        Build a volume backed by a secret.

        Args:
            name: Volume name
            secret_name: Name of the secret to mount
            items: Optional mapping of secret key to file name inside the volume
            is_openshift: Whether the target platform is OpenShift

        Returns:
            Platform volume object
        """
        ...


class AccessTokenLike(Protocol):
    """Shape of ``azure.core.credentials.AccessToken``."""

    token: str
    expires_on: int


class TokenCredentialLike(Protocol):
    """Shape of a synchronous ``azure.core.credentials.TokenCredential``."""

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessTokenLike:
        ...


__all__ = [
    "ErrorCategory",
    "SecretVolumeFactory",
    "AccessTokenLike",
    "TokenCredentialLike",
]
