"""Kubernetes objects for resolved volumes, mounts and environment variables."""

from typing import Iterable, Mapping, Optional

from kubernetes.client import (
    V1EnvVar,
    V1EnvVarSource,
    V1KeyToPath,
    V1SecretKeySelector,
    V1SecretVolumeSource,
    V1Volume,
    V1VolumeMount,
)

# Read-only for everyone; OpenShift assigns its own mode
SECRET_VOLUME_DEFAULT_MODE = 0o444


def create_secret_volume(
    name: str,
    secret_name: str,
    items: Optional[Mapping[str, str]],
    is_openshift: bool,
) -> V1Volume:
    """
    Build a volume backed by a secret.

    Args:
        name: Volume name
        secret_name: Secret to mount
        items: Optional secret key -> file name mapping; all keys when None
        is_openshift: Leave default_mode unset on OpenShift

    Returns:
        V1Volume with a secret volume source
    """
    key_to_paths = None
    if items:
        key_to_paths = [V1KeyToPath(key=key, path=path) for key, path in items.items()]

    return V1Volume(
        name=name,
        secret=V1SecretVolumeSource(
            secret_name=secret_name,
            items=key_to_paths,
            default_mode=None if is_openshift else SECRET_VOLUME_DEFAULT_MODE,
        ),
    )


def to_volume_mounts(mounts: Iterable) -> list[V1VolumeMount]:
    """Convert MountDeclaration values to V1VolumeMount."""
    return [V1VolumeMount(name=m.name, mount_path=m.mount_path) for m in mounts]


def to_env_vars(env_vars: Iterable) -> list[V1EnvVar]:
    """
    Convert EnvVarDeclaration values to V1EnvVar.

    Secret-backed declarations become secretKeyRef sources so the value is
    never written into the pod spec.
    """
    result = []
    for env_var in env_vars:
        if env_var.secret_ref is not None:
            result.append(
                V1EnvVar(
                    name=env_var.name,
                    value_from=V1EnvVarSource(
                        secret_key_ref=V1SecretKeySelector(
                            name=env_var.secret_ref.secret_name,
                            key=env_var.secret_ref.key,
                        )
                    ),
                )
            )
        else:
            result.append(V1EnvVar(name=env_var.name, value=env_var.value))
    return result


__all__ = [
    "SECRET_VOLUME_DEFAULT_MODE",
    "create_secret_volume",
    "to_volume_mounts",
    "to_env_vars",
]
