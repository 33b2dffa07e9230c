"""
Exception hierarchy for client authentication resolution.

Every error raised by the resolvers and the token provider derives from
ClientAuthError and carries an ErrorCategory so callers can decide whether
to abort reconciliation or retry on their own schedule. Nothing in this
package retries internally.
"""

from typing import Any, Sequence

from client_auth.types import ErrorCategory


class ClientAuthError(Exception):
    """
    Base exception for all client authentication errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for retry decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category in (ErrorCategory.TRANSIENT, ErrorCategory.AUTH)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors (Permanent)
# =============================================================================


class ConfigurationError(ClientAuthError):
    """Base class for invalid descriptors and provider configuration."""

    category = ErrorCategory.PERMANENT


class MissingFieldError(ConfigurationError):
    """An authentication descriptor lacks fields its variant requires."""

    def __init__(
        self,
        message: str,
        variant: str,
        fields: Sequence[str] = (),
        cause: Exception | None = None,
    ):
        super().__init__(message, cause, {"auth_type": variant, "fields": list(fields)})
        self.variant = variant
        self.fields = tuple(fields)


class MisconfiguredEndpointError(ConfigurationError):
    """Bootstrap configuration does not name exactly one endpoint."""

    def __init__(
        self,
        message: str,
        endpoints: Sequence[str] = (),
        cause: Exception | None = None,
    ):
        super().__init__(message, cause, {"endpoint_count": len(endpoints)})
        self.endpoints = tuple(endpoints)


# =============================================================================
# Callback Errors
# =============================================================================


class UnsupportedCallbackError(ClientAuthError):
    """The token provider was handed a callback kind it cannot satisfy."""

    category = ErrorCategory.PERMANENT

    def __init__(self, callback: Any):
        message = f"Unsupported callback type: {type(callback).__name__}"
        super().__init__(message, context={"callback_type": type(callback).__name__})
        self.callback = callback


# =============================================================================
# Token Acquisition Errors
# =============================================================================


class TokenAcquisitionError(ClientAuthError):
    """The managed identity credential failed to produce a token."""

    category = ErrorCategory.AUTH


class TokenAcquisitionTimeoutError(TokenAcquisitionError):
    """No token arrived within the acquisition timeout."""

    category = ErrorCategory.TRANSIENT

    def __init__(
        self,
        scope: str,
        timeout_seconds: float,
        cause: Exception | None = None,
    ):
        message = f"Timed out after {timeout_seconds}s acquiring token for scope '{scope}'"
        super().__init__(
            message, cause, {"scope": scope, "timeout_seconds": timeout_seconds}
        )
        self.scope = scope
        self.timeout_seconds = timeout_seconds


# =============================================================================
# Classification Utilities
# =============================================================================


def is_retryable_error(exc: Exception) -> bool:
    """
    Check if a caller may retry the operation that raised exc.

    Only token acquisition failures qualify; descriptor and configuration
    errors need a corrected input first.
    """
    if isinstance(exc, ClientAuthError):
        return exc.is_retryable
    return False


__all__ = [
    "ClientAuthError",
    "ConfigurationError",
    "MissingFieldError",
    "MisconfiguredEndpointError",
    "UnsupportedCallbackError",
    "TokenAcquisitionError",
    "TokenAcquisitionTimeoutError",
    "is_retryable_error",
]
