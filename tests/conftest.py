"""
pytest configuration for client authentication tests.

Adds src directory to Python path for imports and provides shared descriptors.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from client_auth.logging.context import clear_log_context  # noqa: E402
from client_auth.models import (  # noqa: E402
    CertAndKeySecretSource,
    CertSecretSource,
    CustomAuthentication,
    GenericSecretSource,
    OAuthAuthentication,
    PasswordSecretSource,
    PlainAuthentication,
    ScramSha512Authentication,
    TlsAuthentication,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def tls_auth():
    return TlsAuthentication(
        certificate_and_key=CertAndKeySecretSource("my-user", "user.crt", "user.key")
    )


@pytest.fixture
def scram_auth():
    return ScramSha512Authentication(
        username="my-user",
        password_secret=PasswordSecretSource("my-user-secret", "password"),
    )


@pytest.fixture
def plain_auth():
    return PlainAuthentication(
        username="plain-user",
        password_secret=PasswordSecretSource("plain-secret", "pw"),
    )


@pytest.fixture
def oauth_auth():
    return OAuthAuthentication(
        client_id="abc",
        token_endpoint_uri="https://idp/token",
        client_secret=GenericSecretSource("oauth-client", "secret"),
        access_token=GenericSecretSource("oauth-access", "token"),
        refresh_token=GenericSecretSource("oauth-refresh", "token"),
        tls_trusted_certificates=(
            CertSecretSource("ca-one", "ca.crt"),
            CertSecretSource("ca-two", "root.pem"),
        ),
    )


@pytest.fixture
def custom_auth():
    return CustomAuthentication(
        sasl_mechanism="OAUTHBEARER",
        sasl_jaas_config="org.apache.kafka.common.security.oauthbearer.OAuthBearerLoginModule required;",
        sasl_login_callback_handler_class="io.example.ManagedIdentityCallbackHandler",
    )
