"""
Validation of Kafka client authentication descriptors.

Checks that the active variant carries every field it needs before any
volumes, mounts or environment variables are derived from it.
"""

import logging
from dataclasses import dataclass
from typing import Optional, assert_never

from client_auth.errors import MissingFieldError
from client_auth.models import (
    ClientAuthentication,
    CustomAuthentication,
    OAuthAuthentication,
    PlainAuthentication,
    ScramSha512Authentication,
    TlsAuthentication,
)

logger = logging.getLogger(__name__)

TLS_NOT_ENABLED_WARNING = (
    "TLS configuration missing: related TLS client authentication will not work properly"
)

# Field combinations that make an OAuth descriptor usable
OAUTH_ACCEPTED_COMBINATIONS = (
    ("accessToken",),
    ("tokenEndpointUri", "clientId", "refreshToken"),
    ("tokenEndpointUri", "clientId", "clientSecret"),
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a descriptor: a (possibly empty) warning and an optional error."""

    warning: str = ""
    error: Optional[MissingFieldError] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


def _oauth_is_complete(auth: OAuthAuthentication) -> bool:
    if auth.access_token is not None:
        return True
    has_endpoint_and_client = auth.token_endpoint_uri is not None and auth.client_id is not None
    return has_endpoint_and_client and (
        auth.refresh_token is not None or auth.client_secret is not None
    )


def _check(authentication: ClientAuthentication, tls_enabled: bool) -> str:
    """Raise MissingFieldError for an incomplete descriptor, return the warning otherwise."""
    if isinstance(authentication, TlsAuthentication):
        if authentication.certificate_and_key is None:
            raise MissingFieldError(
                "TLS Client authentication selected, but no certificate and key configured.",
                variant=authentication.TYPE,
                fields=("certificateAndKey",),
            )
        if not tls_enabled:
            return TLS_NOT_ENABLED_WARNING
        return ""

    if isinstance(authentication, (ScramSha512Authentication, PlainAuthentication)):
        missing = []
        if authentication.username is None:
            missing.append("username")
        if authentication.password_secret is None:
            missing.append("passwordSecret")
        if missing:
            raise MissingFieldError(
                f"{authentication.SASL_MECHANISM} authentication selected, "
                "but username or password configuration is missing.",
                variant=authentication.TYPE,
                fields=missing,
            )
        return ""

    if isinstance(authentication, OAuthAuthentication):
        if not _oauth_is_complete(authentication):
            combinations = ", ".join(
                f"[{', '.join(combo)}]" for combo in OAUTH_ACCEPTED_COMBINATIONS
            )
            raise MissingFieldError(
                "OAUTH authentication selected, but some options are missing. "
                f"You have to specify one of the following combinations: {combinations}.",
                variant=authentication.TYPE,
                fields=sorted({name for combo in OAUTH_ACCEPTED_COMBINATIONS for name in combo}),
            )
        return ""

    if isinstance(authentication, CustomAuthentication):
        missing = [
            name
            for name, value in (
                ("saslMechanism", authentication.sasl_mechanism),
                ("saslLoginCallbackHandlerClass", authentication.sasl_login_callback_handler_class),
                ("saslJaasConfig", authentication.sasl_jaas_config),
            )
            if value is None
        ]
        if missing:
            raise MissingFieldError(
                "Custom authentication selected, all of the following fields should be provided: "
                "saslMechanism, saslLoginCallbackHandlerClass, saslJaasConfig",
                variant=authentication.TYPE,
                fields=missing,
            )
        return ""

    assert_never(authentication)


def validate(
    authentication: Optional[ClientAuthentication], tls_enabled: bool
) -> ValidationResult:
    """
    Validate a client authentication descriptor without raising.

    Args:
        authentication: Descriptor to check, or None for no authentication
        tls_enabled: Whether TLS is enabled on the connection to the cluster

    Returns:
        ValidationResult with the non-fatal warning (empty if none) and the
        MissingFieldError describing an incomplete descriptor, if any
    """
    if authentication is None:
        return ValidationResult()
    try:
        return ValidationResult(warning=_check(authentication, tls_enabled))
    except MissingFieldError as e:
        return ValidationResult(error=e)


def validate_client_authentication(
    authentication: Optional[ClientAuthentication], tls_enabled: bool
) -> str:
    """
    Validate a client authentication descriptor.

    Args:
        authentication: Descriptor to check, or None for no authentication
        tls_enabled: Whether TLS is enabled on the connection to the cluster

    Returns:
        Warning message, empty when there is nothing to report

    Raises:
        MissingFieldError: If the descriptor lacks required fields
    """
    result = validate(authentication, tls_enabled)
    if result.error is not None:
        logger.error(
            "Client authentication is incomplete",
            extra={"auth_type": result.error.variant, "fields": list(result.error.fields)},
        )
        raise result.error
    if result.warning:
        logger.warning(result.warning, extra={"auth_type": authentication.TYPE})
    return result.warning


__all__ = [
    "ValidationResult",
    "TLS_NOT_ENABLED_WARNING",
    "OAUTH_ACCEPTED_COMBINATIONS",
    "validate",
    "validate_client_authentication",
]
