"""
Authentication properties and environment variables for Kafka clients.

The container entrypoint of each component turns these into client
configuration; components differ only in how they prefix the variable
names, which is why build_env_vars() takes a namer.

Example:
    >>> build_properties(PlainAuthentication("user", PasswordSecretSource("creds", "pw")))
    {'SASL_USERNAME': 'user', 'SASL_PASSWORD_FILE': 'creds/pw', 'SASL_MECHANISM': 'PLAIN'}
"""

from dataclasses import dataclass
from typing import Callable, Optional, assert_never

from client_auth.models import (
    ClientAuthentication,
    CustomAuthentication,
    GenericSecretSource,
    OAuthAuthentication,
    PlainAuthentication,
    ScramSha512Authentication,
    TlsAuthentication,
)

# Property names
TLS_AUTH_CERT = "TLS_AUTH_CERT"
TLS_AUTH_KEY = "TLS_AUTH_KEY"
SASL_USERNAME = "SASL_USERNAME"
SASL_PASSWORD_FILE = "SASL_PASSWORD_FILE"
SASL_MECHANISM = "SASL_MECHANISM"
OAUTH_CONFIG = "OAUTH_CONFIG"
CUSTOM_SASL_MECHANISM = "CUSTOM_SASL_MECHANISM"
SASL_JAAS_CONFIG = "SASL_JAAS_CONFIG"
SASL_LOGIN_CALLBACK_HANDLER_CLASS = "SASL_LOGIN_CALLBACK_HANDLER_CLASS"

# Secret-backed OAuth environment variables
OAUTH_CLIENT_SECRET = "OAUTH_CLIENT_SECRET"
OAUTH_ACCESS_TOKEN = "OAUTH_ACCESS_TOKEN"
OAUTH_REFRESH_TOKEN = "OAUTH_REFRESH_TOKEN"

# OAuth client option keys
OAUTH_CLIENT_ID = "oauth.client.id"
OAUTH_TOKEN_ENDPOINT_URI = "oauth.token.endpoint.uri"
OAUTH_SCOPE = "oauth.scope"
OAUTH_AUDIENCE = "oauth.audience"
OAUTH_SSL_ENDPOINT_IDENTIFICATION_ALGORITHM = "oauth.ssl.endpoint.identification.algorithm"
OAUTH_ACCESS_TOKEN_IS_JWT = "oauth.access.token.is.jwt"
OAUTH_MAX_TOKEN_EXPIRY_SECONDS = "oauth.max.token.expiry.seconds"

EnvVarNamer = Callable[[str], str]


@dataclass(frozen=True)
class EnvVarDeclaration:
    """Environment variable with either a literal value or a secret key reference."""

    name: str
    value: Optional[str] = None
    secret_ref: Optional[GenericSecretSource] = None


def _option(key: str, value: object) -> str:
    return f'{key}="{value}"'


def build_oauth_config(auth: OAuthAuthentication) -> str:
    """
    Build the OAUTH_CONFIG option string.

    Options appear in a fixed order so the string (and anything hashed from
    it) stays stable between reconciliations.
    """
    options = []
    if auth.client_id is not None:
        options.append(_option(OAUTH_CLIENT_ID, auth.client_id))
    if auth.token_endpoint_uri is not None:
        options.append(_option(OAUTH_TOKEN_ENDPOINT_URI, auth.token_endpoint_uri))
    if auth.scope is not None:
        options.append(_option(OAUTH_SCOPE, auth.scope))
    if auth.audience is not None:
        options.append(_option(OAUTH_AUDIENCE, auth.audience))
    if auth.disable_tls_hostname_verification:
        options.append(_option(OAUTH_SSL_ENDPOINT_IDENTIFICATION_ALGORITHM, ""))
    if not auth.access_token_is_jwt:
        options.append(_option(OAUTH_ACCESS_TOKEN_IS_JWT, "false"))
    if auth.max_token_expiry_seconds > 0:
        options.append(_option(OAUTH_MAX_TOKEN_EXPIRY_SECONDS, auth.max_token_expiry_seconds))
    return " ".join(options)


def build_properties(authentication: Optional[ClientAuthentication]) -> dict[str, str]:
    """
    Get the authentication properties for a Kafka client.

    Args:
        authentication: Descriptor, or None for no authentication

    Returns:
        Property name -> value, in a stable order. Secret values are never
        included; password and certificate properties are paths relative
        to the mounted secret.
    """
    properties: dict[str, str] = {}
    if authentication is None:
        return properties

    if isinstance(authentication, TlsAuthentication):
        cert_and_key = authentication.certificate_and_key
        properties[TLS_AUTH_CERT] = f"{cert_and_key.secret_name}/{cert_and_key.certificate}"
        properties[TLS_AUTH_KEY] = f"{cert_and_key.secret_name}/{cert_and_key.key}"
    elif isinstance(authentication, (PlainAuthentication, ScramSha512Authentication)):
        password = authentication.password_secret
        properties[SASL_USERNAME] = authentication.username
        properties[SASL_PASSWORD_FILE] = f"{password.secret_name}/{password.password}"
        properties[SASL_MECHANISM] = authentication.SASL_MECHANISM
    elif isinstance(authentication, OAuthAuthentication):
        properties[SASL_MECHANISM] = authentication.SASL_MECHANISM
        properties[OAUTH_CONFIG] = build_oauth_config(authentication)
    elif isinstance(authentication, CustomAuthentication):
        properties[SASL_MECHANISM] = authentication.SASL_MECHANISM
        properties[CUSTOM_SASL_MECHANISM] = authentication.sasl_mechanism
        properties[SASL_JAAS_CONFIG] = authentication.sasl_jaas_config
        properties[SASL_LOGIN_CALLBACK_HANDLER_CLASS] = (
            authentication.sasl_login_callback_handler_class
        )
    else:
        assert_never(authentication)

    return properties


def build_env_vars(
    authentication: Optional[ClientAuthentication],
    env_var_namer: EnvVarNamer,
) -> list[EnvVarDeclaration]:
    """
    Get the authentication environment variables for a Kafka client.

    Args:
        authentication: Descriptor, or None for no authentication
        env_var_namer: Maps a property name to the component's variable name

    Returns:
        One literal variable per property, followed by secret-backed
        variables for the OAuth client secret, access token and refresh token
    """
    if authentication is None:
        return []

    env_vars = [
        EnvVarDeclaration(name=env_var_namer(name), value=value)
        for name, value in build_properties(authentication).items()
    ]

    if isinstance(authentication, OAuthAuthentication):
        for name, ref in (
            (OAUTH_CLIENT_SECRET, authentication.client_secret),
            (OAUTH_ACCESS_TOKEN, authentication.access_token),
            (OAUTH_REFRESH_TOKEN, authentication.refresh_token),
        ):
            if ref is not None:
                env_vars.append(EnvVarDeclaration(name=env_var_namer(name), secret_ref=ref))

    return env_vars


__all__ = [
    "TLS_AUTH_CERT",
    "TLS_AUTH_KEY",
    "SASL_USERNAME",
    "SASL_PASSWORD_FILE",
    "SASL_MECHANISM",
    "OAUTH_CONFIG",
    "CUSTOM_SASL_MECHANISM",
    "SASL_JAAS_CONFIG",
    "SASL_LOGIN_CALLBACK_HANDLER_CLASS",
    "OAUTH_CLIENT_SECRET",
    "OAUTH_ACCESS_TOKEN",
    "OAUTH_REFRESH_TOKEN",
    "EnvVarNamer",
    "EnvVarDeclaration",
    "build_oauth_config",
    "build_properties",
    "build_env_vars",
]
