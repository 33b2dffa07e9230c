"""Authentication descriptor and secret reference models."""

from client_auth.models.authentication import (
    SASL_MECHANISM_CUSTOM,
    SASL_MECHANISM_OAUTHBEARER,
    SASL_MECHANISM_PLAIN,
    SASL_MECHANISM_SCRAM_SHA_512,
    ClientAuthentication,
    CustomAuthentication,
    JmxAuthentication,
    JmxAuthenticationPassword,
    OAuthAuthentication,
    PlainAuthentication,
    ScramSha512Authentication,
    TlsAuthentication,
)
from client_auth.models.secrets import (
    CertAndKeySecretSource,
    CertSecretSource,
    GenericSecretSource,
    PasswordSecretSource,
    SecretReference,
)

__all__ = [
    # Descriptors
    "ClientAuthentication",
    "TlsAuthentication",
    "ScramSha512Authentication",
    "PlainAuthentication",
    "OAuthAuthentication",
    "CustomAuthentication",
    "JmxAuthentication",
    "JmxAuthenticationPassword",
    # Mechanisms
    "SASL_MECHANISM_PLAIN",
    "SASL_MECHANISM_SCRAM_SHA_512",
    "SASL_MECHANISM_OAUTHBEARER",
    "SASL_MECHANISM_CUSTOM",
    # Secret references
    "SecretReference",
    "CertAndKeySecretSource",
    "PasswordSecretSource",
    "GenericSecretSource",
    "CertSecretSource",
]
