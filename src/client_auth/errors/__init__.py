"""
Error classification and exception hierarchy.

Provides:
- ClientAuthError hierarchy for typed exceptions
- Retry classification helper
"""

from client_auth.errors.exceptions import (
    # Base class
    ClientAuthError,
    # Descriptor and provider configuration
    ConfigurationError,
    MisconfiguredEndpointError,
    MissingFieldError,
    # Token provider
    TokenAcquisitionError,
    TokenAcquisitionTimeoutError,
    UnsupportedCallbackError,
    # Classification utilities
    is_retryable_error,
)
from client_auth.types import ErrorCategory

__all__ = [
    "ErrorCategory",
    "ClientAuthError",
    "ConfigurationError",
    "MissingFieldError",
    "MisconfiguredEndpointError",
    "UnsupportedCallbackError",
    "TokenAcquisitionError",
    "TokenAcquisitionTimeoutError",
    "is_retryable_error",
]
