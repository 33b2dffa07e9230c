"""
Authentication descriptors for Kafka client based components.

A descriptor is one variant of a closed union. Variants are immutable
dataclasses; whether their fields are complete is checked by
``client_auth.auth.validation`` rather than by the constructors, so that a
half-filled descriptor coming from an external manifest can still be
represented and reported on.

Code that dispatches over ClientAuthentication uses isinstance checks ending
in ``typing.assert_never`` so type checkers flag any branch left out when a
variant is added.

Example:
    >>> from client_auth.models import ScramSha512Authentication, PasswordSecretSource
    >>> auth = ScramSha512Authentication(
    ...     username="connect-user",
    ...     password_secret=PasswordSecretSource("connect-user", "password"),
    ... )
    >>> auth.TYPE
    'scram-sha-512'
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from client_auth.models.secrets import (
    CertAndKeySecretSource,
    CertSecretSource,
    GenericSecretSource,
    PasswordSecretSource,
)

# SASL mechanism names written to SASL_MECHANISM
SASL_MECHANISM_PLAIN = "PLAIN"
SASL_MECHANISM_SCRAM_SHA_512 = "SCRAM-SHA-512"
SASL_MECHANISM_OAUTHBEARER = "OAUTHBEARER"
SASL_MECHANISM_CUSTOM = "custom"


@dataclass(frozen=True)
class TlsAuthentication:
    """Mutual TLS using a client certificate and key."""

    TYPE: ClassVar[str] = "tls"

    certificate_and_key: Optional[CertAndKeySecretSource] = None


@dataclass(frozen=True)
class ScramSha512Authentication:
    """SASL SCRAM-SHA-512 with the password read from a secret."""

    TYPE: ClassVar[str] = "scram-sha-512"
    SASL_MECHANISM: ClassVar[str] = SASL_MECHANISM_SCRAM_SHA_512

    username: Optional[str] = None
    password_secret: Optional[PasswordSecretSource] = None


@dataclass(frozen=True)
class PlainAuthentication:
    """SASL PLAIN with the password read from a secret."""

    TYPE: ClassVar[str] = "plain"
    SASL_MECHANISM: ClassVar[str] = SASL_MECHANISM_PLAIN

    username: Optional[str] = None
    password_secret: Optional[PasswordSecretSource] = None


@dataclass(frozen=True)
class OAuthAuthentication:
    """
    SASL OAUTHBEARER against an OAuth 2.0 authorization server.

    Attributes:
        access_token: Secret holding a long-lived access token
        refresh_token: Secret holding a refresh token
        client_secret: Secret holding the OAuth client secret
        client_id: OAuth client ID
        token_endpoint_uri: Authorization server token endpoint
        scope: Scope requested when authenticating
        audience: Audience requested when authenticating
        disable_tls_hostname_verification: Skip hostname verification
            against the authorization server
        access_token_is_jwt: Whether the access token is a JWT
        max_token_expiry_seconds: Cap on token lifetime; 0 means no cap
        tls_trusted_certificates: CA certificates used to reach the
            authorization server, in declaration order
    """

    TYPE: ClassVar[str] = "oauth"
    SASL_MECHANISM: ClassVar[str] = SASL_MECHANISM_OAUTHBEARER

    access_token: Optional[GenericSecretSource] = None
    refresh_token: Optional[GenericSecretSource] = None
    client_secret: Optional[GenericSecretSource] = None
    client_id: Optional[str] = None
    token_endpoint_uri: Optional[str] = None
    scope: Optional[str] = None
    audience: Optional[str] = None
    disable_tls_hostname_verification: bool = False
    access_token_is_jwt: bool = True
    max_token_expiry_seconds: int = 0
    tls_trusted_certificates: tuple[CertSecretSource, ...] = ()


@dataclass(frozen=True)
class CustomAuthentication:
    """
    Caller-defined SASL mechanism with its own JAAS config and login
    callback handler class (e.g. a managed identity callback handler).
    """

    TYPE: ClassVar[str] = "custom"
    SASL_MECHANISM: ClassVar[str] = SASL_MECHANISM_CUSTOM

    sasl_mechanism: Optional[str] = None
    sasl_jaas_config: Optional[str] = None
    sasl_login_callback_handler_class: Optional[str] = None


ClientAuthentication = Union[
    TlsAuthentication,
    ScramSha512Authentication,
    PlainAuthentication,
    OAuthAuthentication,
    CustomAuthentication,
]


@dataclass(frozen=True)
class JmxAuthenticationPassword:
    """Password protection for the JMX port."""

    TYPE: ClassVar[str] = "password"


JmxAuthentication = JmxAuthenticationPassword


__all__ = [
    "TlsAuthentication",
    "ScramSha512Authentication",
    "PlainAuthentication",
    "OAuthAuthentication",
    "CustomAuthentication",
    "ClientAuthentication",
    "JmxAuthenticationPassword",
    "JmxAuthentication",
    "SASL_MECHANISM_PLAIN",
    "SASL_MECHANISM_SCRAM_SHA_512",
    "SASL_MECHANISM_OAUTHBEARER",
    "SASL_MECHANISM_CUSTOM",
]
