"""Secret references used by authentication descriptors.

A secret reference names a secret and, where relevant, the fields inside it.
It never holds the credential itself.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SecretReference:
    """Base for all secret references."""

    secret_name: str


@dataclass(frozen=True)
class CertAndKeySecretSource(SecretReference):
    """Client certificate and private key stored in one secret."""

    certificate: str
    key: str


@dataclass(frozen=True)
class PasswordSecretSource(SecretReference):
    """Field of a secret holding a SASL password."""

    password: str


@dataclass(frozen=True)
class GenericSecretSource(SecretReference):
    """Single key of a secret (OAuth client secret, access or refresh token)."""

    key: str


@dataclass(frozen=True)
class CertSecretSource(SecretReference):
    """Trusted CA certificate stored in a secret."""

    certificate: str


__all__ = [
    "SecretReference",
    "CertAndKeySecretSource",
    "PasswordSecretSource",
    "GenericSecretSource",
    "CertSecretSource",
]
