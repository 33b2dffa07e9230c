"""
Secret volumes and volume mounts for Kafka client authentication.

Both resolvers derive the same names from a descriptor so that each mount
points at the volume built for it:

    TLS / PLAIN / SCRAM-SHA-512  ->  volume_name_prefix + secret_name
    OAuth trusted certificate i  ->  f"{oauth_volume_name_prefix}-{i}"
    OAuth secrets (opt-in)       ->  volume_name_prefix + secret_name

Resolvers are pure: each call returns a fresh list with no repeated names.
When several call sites contribute to one pod, the caller combines their
results with merge_declarations().

Example:
    >>> volumes = resolve_volumes(auth, oauth_volume_name_prefix="oauth-certs")
    >>> volumes = merge_declarations(existing_volumes, volumes)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence, TypeVar, assert_never

from client_auth.auth.k8s import create_secret_volume
from client_auth.models import (
    CertSecretSource,
    ClientAuthentication,
    CustomAuthentication,
    OAuthAuthentication,
    PlainAuthentication,
    ScramSha512Authentication,
    SecretReference,
    TlsAuthentication,
)
from client_auth.types import SecretVolumeFactory

logger = logging.getLogger(__name__)

# File name the OAuth trusted certificate is exposed as inside its volume
OAUTH_CERT_FILE_NAME = "tls.crt"


@dataclass(frozen=True)
class VolumeDeclaration:
    """Secret volume keyed by its derived name; the platform object is not compared."""

    name: str
    secret_name: str = field(compare=False)
    volume: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class MountDeclaration:
    """Volume mount keyed by the name of the volume it mounts."""

    name: str
    mount_path: str = field(compare=False)


@dataclass(frozen=True)
class MountPaths:
    """
    Base paths that secrets are mounted under.

    ``tls``, ``password`` and ``oauth_secrets`` are prefixes the secret name
    is appended to directly, so they normally end with a slash.
    ``oauth_certs`` is a directory; certificates go in ``<secret>-<index>``
    subdirectories below it.
    """

    tls: str
    password: str
    oauth_certs: str
    oauth_secrets: str = ""


D = TypeVar("D", VolumeDeclaration, MountDeclaration)


def merge_declarations(existing: Sequence[D], additions: Iterable[D]) -> list[D]:
    """
    Combine declarations, skipping any whose name is already present.

    Args:
        existing: Declarations already collected (left untouched)
        additions: Declarations to add in order

    Returns:
        New list with existing declarations first, then new names from additions
    """
    merged = list(existing)
    seen = {d.name for d in merged}
    for declaration in additions:
        if declaration.name in seen:
            logger.debug("Skipping duplicate declaration", extra={"volume_name": declaration.name})
            continue
        seen.add(declaration.name)
        merged.append(declaration)
    return merged


def oauth_certificate_volume_name(prefix: str, index: int) -> str:
    return f"{prefix}-{index}"


def _oauth_secret_references(auth: OAuthAuthentication) -> list[SecretReference]:
    return [
        ref
        for ref in (auth.client_secret, auth.access_token, auth.refresh_token)
        if ref is not None
    ]


def resolve_oauth_certificate_volumes(
    volume_name_prefix: str,
    trusted_certificates: Sequence[CertSecretSource],
    is_openshift: bool = False,
    volume_factory: SecretVolumeFactory = create_secret_volume,
) -> list[VolumeDeclaration]:
    """
    Build one volume per trusted certificate used to reach an OAuth server.

    Each volume exposes only the certificate field, renamed to tls.crt.
    Used for both OAuth clients and OAuth-enabled listeners.
    """
    volumes = []
    for index, cert in enumerate(trusted_certificates or ()):
        name = oauth_certificate_volume_name(volume_name_prefix, index)
        volumes.append(
            VolumeDeclaration(
                name=name,
                secret_name=cert.secret_name,
                volume=volume_factory(
                    name, cert.secret_name, {cert.certificate: OAUTH_CERT_FILE_NAME}, is_openshift
                ),
            )
        )
    return volumes


def resolve_oauth_certificate_mounts(
    volume_name_prefix: str,
    trusted_certificates: Sequence[CertSecretSource],
    base_mount_path: str,
) -> list[MountDeclaration]:
    """Build the mounts matching resolve_oauth_certificate_volumes()."""
    return [
        MountDeclaration(
            name=oauth_certificate_volume_name(volume_name_prefix, index),
            mount_path=f"{base_mount_path}/{cert.secret_name}-{index}",
        )
        for index, cert in enumerate(trusted_certificates or ())
    ]


def resolve_volumes(
    authentication: Optional[ClientAuthentication],
    volume_name_prefix: str = "",
    *,
    oauth_volume_name_prefix: str,
    is_openshift: bool = False,
    create_oauth_secret_volumes: bool = False,
    volume_factory: SecretVolumeFactory = create_secret_volume,
) -> list[VolumeDeclaration]:
    """
    Build the secret volumes a Kafka client needs for authentication.

    Args:
        authentication: Descriptor, or None for no authentication
        volume_name_prefix: Prefix for volumes named after their secret
        oauth_volume_name_prefix: Prefix for OAuth trusted certificate volumes
        is_openshift: Whether the target platform is OpenShift
        create_oauth_secret_volumes: Also mount OAuth client secret and tokens
        volume_factory: Builds the platform volume object

    Returns:
        Volumes in declaration order, without repeated names
    """
    if authentication is None:
        return []

    def secret_volume(secret_name: str) -> VolumeDeclaration:
        name = volume_name_prefix + secret_name
        return VolumeDeclaration(
            name=name,
            secret_name=secret_name,
            volume=volume_factory(name, secret_name, None, is_openshift),
        )

    volumes: list[VolumeDeclaration] = []
    if isinstance(authentication, TlsAuthentication):
        volumes.append(secret_volume(authentication.certificate_and_key.secret_name))
    elif isinstance(authentication, (PlainAuthentication, ScramSha512Authentication)):
        volumes.append(secret_volume(authentication.password_secret.secret_name))
    elif isinstance(authentication, OAuthAuthentication):
        volumes.extend(
            resolve_oauth_certificate_volumes(
                oauth_volume_name_prefix,
                authentication.tls_trusted_certificates,
                is_openshift,
                volume_factory,
            )
        )
        if create_oauth_secret_volumes:
            volumes.extend(
                secret_volume(ref.secret_name) for ref in _oauth_secret_references(authentication)
            )
    elif isinstance(authentication, CustomAuthentication):
        pass
    else:
        assert_never(authentication)

    return merge_declarations([], volumes)


def resolve_mounts(
    authentication: Optional[ClientAuthentication],
    mount_paths: MountPaths,
    volume_name_prefix: str = "",
    *,
    oauth_volume_name_prefix: str,
    mount_oauth_secret_volumes: bool = False,
) -> list[MountDeclaration]:
    """
    Build the volume mounts matching resolve_volumes().

    Args:
        authentication: Descriptor, or None for no authentication
        mount_paths: Base paths per kind of secret
        volume_name_prefix: Same prefix passed to resolve_volumes()
        oauth_volume_name_prefix: Same OAuth prefix passed to resolve_volumes()
        mount_oauth_secret_volumes: Also mount OAuth client secret and tokens

    Returns:
        Mounts in declaration order, without repeated names
    """
    if authentication is None:
        return []

    def secret_mount(secret_name: str, base_path: str) -> MountDeclaration:
        return MountDeclaration(
            name=volume_name_prefix + secret_name, mount_path=base_path + secret_name
        )

    mounts: list[MountDeclaration] = []
    if isinstance(authentication, TlsAuthentication):
        mounts.append(
            secret_mount(authentication.certificate_and_key.secret_name, mount_paths.tls)
        )
    elif isinstance(authentication, (PlainAuthentication, ScramSha512Authentication)):
        mounts.append(
            secret_mount(authentication.password_secret.secret_name, mount_paths.password)
        )
    elif isinstance(authentication, OAuthAuthentication):
        mounts.extend(
            resolve_oauth_certificate_mounts(
                oauth_volume_name_prefix,
                authentication.tls_trusted_certificates,
                mount_paths.oauth_certs,
            )
        )
        if mount_oauth_secret_volumes:
            mounts.extend(
                secret_mount(ref.secret_name, mount_paths.oauth_secrets)
                for ref in _oauth_secret_references(authentication)
            )
    elif isinstance(authentication, CustomAuthentication):
        pass
    else:
        assert_never(authentication)

    return merge_declarations([], mounts)


__all__ = [
    "OAUTH_CERT_FILE_NAME",
    "VolumeDeclaration",
    "MountDeclaration",
    "MountPaths",
    "merge_declarations",
    "oauth_certificate_volume_name",
    "resolve_oauth_certificate_volumes",
    "resolve_oauth_certificate_mounts",
    "resolve_volumes",
    "resolve_mounts",
]
