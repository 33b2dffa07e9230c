"""Tests for authentication properties and environment variables."""

import pytest

from client_auth.auth.properties import (
    EnvVarDeclaration,
    build_env_vars,
    build_oauth_config,
    build_properties,
)
from client_auth.models import GenericSecretSource, OAuthAuthentication


def prefixed(name):
    return f"KAFKA_CONNECT_{name}"


class TestBuildProperties:

    def test_absent_descriptor(self):
        assert build_properties(None) == {}

    def test_tls(self, tls_auth):
        assert build_properties(tls_auth) == {
            "TLS_AUTH_CERT": "my-user/user.crt",
            "TLS_AUTH_KEY": "my-user/user.key",
        }

    def test_scram(self, scram_auth):
        assert build_properties(scram_auth) == {
            "SASL_USERNAME": "my-user",
            "SASL_PASSWORD_FILE": "my-user-secret/password",
            "SASL_MECHANISM": "SCRAM-SHA-512",
        }

    def test_plain(self, plain_auth):
        properties = build_properties(plain_auth)

        assert properties["SASL_MECHANISM"] == "PLAIN"
        assert properties["SASL_PASSWORD_FILE"] == "plain-secret/pw"

    def test_custom_fields_are_verbatim(self, custom_auth):
        properties = build_properties(custom_auth)

        assert list(properties) == [
            "SASL_MECHANISM",
            "CUSTOM_SASL_MECHANISM",
            "SASL_JAAS_CONFIG",
            "SASL_LOGIN_CALLBACK_HANDLER_CLASS",
        ]
        assert properties["SASL_MECHANISM"] == "custom"
        assert properties["CUSTOM_SASL_MECHANISM"] == "OAUTHBEARER"
        assert properties["SASL_JAAS_CONFIG"] == custom_auth.sasl_jaas_config

    def test_oauth(self, oauth_auth):
        properties = build_properties(oauth_auth)

        assert properties == {
            "SASL_MECHANISM": "OAUTHBEARER",
            "OAUTH_CONFIG": 'oauth.client.id="abc" oauth.token.endpoint.uri="https://idp/token"',
        }

    def test_secret_values_never_appear(self, oauth_auth):
        values = " ".join(build_properties(oauth_auth).values())

        assert "oauth-client" not in values
        assert "oauth-access" not in values


class TestBuildOAuthConfig:

    def test_non_jwt_token(self):
        auth = OAuthAuthentication(
            client_id="abc", token_endpoint_uri="https://idp/token", access_token_is_jwt=False
        )

        assert build_oauth_config(auth) == (
            'oauth.client.id="abc" oauth.token.endpoint.uri="https://idp/token" '
            'oauth.access.token.is.jwt="false"'
        )

    def test_all_options_in_order(self):
        auth = OAuthAuthentication(
            client_id="abc",
            token_endpoint_uri="https://idp/token",
            scope="kafka",
            audience="cluster",
            disable_tls_hostname_verification=True,
            access_token_is_jwt=False,
            max_token_expiry_seconds=300,
        )

        assert build_oauth_config(auth) == (
            'oauth.client.id="abc" '
            'oauth.token.endpoint.uri="https://idp/token" '
            'oauth.scope="kafka" '
            'oauth.audience="cluster" '
            'oauth.ssl.endpoint.identification.algorithm="" '
            'oauth.access.token.is.jwt="false" '
            'oauth.max.token.expiry.seconds="300"'
        )

    @pytest.mark.parametrize("expiry", [0, -1])
    def test_non_positive_expiry_is_omitted(self, expiry):
        auth = OAuthAuthentication(client_id="abc", max_token_expiry_seconds=expiry)

        assert build_oauth_config(auth) == 'oauth.client.id="abc"'

    def test_access_token_only(self):
        auth = OAuthAuthentication(access_token=GenericSecretSource("tok", "token"))

        assert build_oauth_config(auth) == ""


class TestBuildEnvVars:

    def test_absent_descriptor(self):
        assert build_env_vars(None, prefixed) == []

    def test_namer_applied_to_every_property(self, scram_auth):
        env_vars = build_env_vars(scram_auth, prefixed)

        assert env_vars == [
            EnvVarDeclaration("KAFKA_CONNECT_SASL_USERNAME", value="my-user"),
            EnvVarDeclaration("KAFKA_CONNECT_SASL_PASSWORD_FILE", value="my-user-secret/password"),
            EnvVarDeclaration("KAFKA_CONNECT_SASL_MECHANISM", value="SCRAM-SHA-512"),
        ]

    def test_oauth_secrets_come_from_secret_references(self, oauth_auth):
        env_vars = build_env_vars(oauth_auth, prefixed)

        secret_backed = [e for e in env_vars if e.secret_ref is not None]
        assert [e.name for e in secret_backed] == [
            "KAFKA_CONNECT_OAUTH_CLIENT_SECRET",
            "KAFKA_CONNECT_OAUTH_ACCESS_TOKEN",
            "KAFKA_CONNECT_OAUTH_REFRESH_TOKEN",
        ]
        assert secret_backed[0].secret_ref == GenericSecretSource("oauth-client", "secret")
        assert all(e.value is None for e in secret_backed)

    def test_literal_properties_come_first(self, oauth_auth):
        env_vars = build_env_vars(oauth_auth, prefixed)

        assert [e.name for e in env_vars[:2]] == [
            "KAFKA_CONNECT_SASL_MECHANISM",
            "KAFKA_CONNECT_OAUTH_CONFIG",
        ]

    def test_unset_oauth_secrets_are_skipped(self):
        auth = OAuthAuthentication(access_token=GenericSecretSource("tok", "token"))

        names = [e.name for e in build_env_vars(auth, prefixed)]

        assert names == [
            "KAFKA_CONNECT_SASL_MECHANISM",
            "KAFKA_CONNECT_OAUTH_CONFIG",
            "KAFKA_CONNECT_OAUTH_ACCESS_TOKEN",
        ]
