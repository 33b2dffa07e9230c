"""
Tests for the managed identity token provider.

Covers scope derivation, bootstrap configuration errors, callback handling
and the bounded token acquisition.
"""

import threading
import time
from unittest.mock import MagicMock, Mock

import pytest
from azure.core.credentials import AccessToken
from azure.core.exceptions import ClientAuthenticationError

from client_auth.auth import managed_identity
from client_auth.auth.managed_identity import (
    BOOTSTRAP_SERVERS_CONFIG,
    ManagedIdentityTokenProvider,
    OAuthBearerTokenCallback,
    TokenHandle,
)
from client_auth.errors import (
    MisconfiguredEndpointError,
    TokenAcquisitionError,
    TokenAcquisitionTimeoutError,
    UnsupportedCallbackError,
)
from client_auth.types import ErrorCategory

EXPIRES_ON = 1_700_000_000


def make_provider(token="test-token", expires_on=EXPIRES_ON, side_effect=None):
    credential = Mock()
    if side_effect is not None:
        credential.get_token.side_effect = side_effect
    else:
        credential.get_token.return_value = AccessToken(token, expires_on)
    factory = Mock(return_value=credential)
    return ManagedIdentityTokenProvider(credential_factory=factory), factory, credential


def configured(provider, servers="broker1.servicebus.windows.net:9093"):
    provider.configure({BOOTSTRAP_SERVERS_CONFIG: servers})
    return provider


class TestParseScope:

    def test_brackets_are_stripped(self):
        assert ManagedIdentityTokenProvider.parse_scope("[broker1:9093]") == "https://broker1:9093"

    def test_host_without_port(self):
        assert ManagedIdentityTokenProvider.parse_scope("broker1") == "https://broker1"

    def test_event_hubs_namespace(self):
        scope = ManagedIdentityTokenProvider.parse_scope("myns.servicebus.windows.net:9093")

        assert scope == "https://myns.servicebus.windows.net:9093"

    def test_surrounding_whitespace(self):
        assert ManagedIdentityTokenProvider.parse_scope(" broker1:9093 ") == "https://broker1:9093"


class TestConfigure:

    def test_single_endpoint_string(self):
        provider, _, _ = make_provider()

        configured(provider, "broker1:9093")

        assert provider.scope == "https://broker1:9093"
        assert provider.is_configured

    def test_single_endpoint_list(self):
        provider, _, _ = make_provider()

        provider.configure({BOOTSTRAP_SERVERS_CONFIG: ["[broker1:9093]"]})

        assert provider.scope == "https://broker1:9093"

    def test_aiokafka_style_key(self):
        provider, _, _ = make_provider()

        provider.configure({"bootstrap_servers": "broker1:9093"})

        assert provider.scope == "https://broker1:9093"

    @pytest.mark.parametrize(
        "servers",
        ["broker1:9093,broker2:9093", ["broker1:9093", "broker2:9093"]],
    )
    def test_two_endpoints_rejected(self, servers):
        provider, _, _ = make_provider()

        with pytest.raises(MisconfiguredEndpointError) as exc_info:
            provider.configure({BOOTSTRAP_SERVERS_CONFIG: servers})

        assert exc_info.value.endpoints == ("broker1:9093", "broker2:9093")
        assert exc_info.value.category == ErrorCategory.PERMANENT
        assert not provider.is_configured

    @pytest.mark.parametrize("configs", [{}, {BOOTSTRAP_SERVERS_CONFIG: ""}, {BOOTSTRAP_SERVERS_CONFIG: []}])
    def test_no_endpoint_rejected(self, configs):
        provider, _, _ = make_provider()

        with pytest.raises(MisconfiguredEndpointError):
            provider.configure(configs)

    def test_mechanism_and_jaas_entries_are_ignored(self):
        provider, _, _ = make_provider()

        provider.configure(
            {BOOTSTRAP_SERVERS_CONFIG: "broker1:9093"},
            mechanism="OAUTHBEARER",
            jaas_config_entries=[object()],
        )

        assert provider.scope == "https://broker1:9093"


class TestHandle:

    def test_populates_token_handle(self):
        provider, factory, credential = make_provider()
        configured(provider, "broker1:9093")
        callback = OAuthBearerTokenCallback()

        provider.handle([callback])

        assert callback.token == TokenHandle(value="test-token", lifetime_ms=EXPIRES_ON * 1000)
        assert callback.token.scope == frozenset()
        assert callback.token.principal_name is None
        assert callback.token.start_time_ms is None
        credential.get_token.assert_called_once_with("https://broker1:9093")

    def test_every_callback_gets_a_fresh_token(self):
        provider, factory, credential = make_provider()
        configured(provider)
        callbacks = [OAuthBearerTokenCallback(), OAuthBearerTokenCallback()]

        provider.handle(callbacks)
        provider.handle([OAuthBearerTokenCallback()])

        assert credential.get_token.call_count == 3
        assert factory.call_count == 3
        assert all(cb.token is not None for cb in callbacks)

    def test_credential_is_closed_after_use(self):
        provider, _, credential = make_provider()
        configured(provider)

        provider.handle([OAuthBearerTokenCallback()])

        credential.close.assert_called_once_with()

    def test_empty_callback_list_acquires_nothing(self):
        provider, factory, _ = make_provider()
        configured(provider)

        provider.handle([])

        factory.assert_not_called()

    def test_unsupported_callback(self):
        provider, factory, _ = make_provider()
        configured(provider)

        with pytest.raises(UnsupportedCallbackError) as exc_info:
            provider.handle([object()])

        assert "Unsupported callback type: object" in str(exc_info.value)
        factory.assert_not_called()

    def test_unconfigured_provider(self):
        provider, factory, _ = make_provider()

        with pytest.raises(MisconfiguredEndpointError):
            provider.handle([OAuthBearerTokenCallback()])

        factory.assert_not_called()

    def test_credential_failure(self):
        provider, _, _ = make_provider(side_effect=ClientAuthenticationError("no identity"))
        configured(provider)
        callback = OAuthBearerTokenCallback()

        with pytest.raises(TokenAcquisitionError) as exc_info:
            provider.handle([callback])

        assert not isinstance(exc_info.value, TokenAcquisitionTimeoutError)
        assert isinstance(exc_info.value.__cause__, ClientAuthenticationError)
        assert exc_info.value.category == ErrorCategory.AUTH
        assert callback.token is None

    def test_empty_token(self):
        provider, _, _ = make_provider(token="")
        configured(provider)

        with pytest.raises(TokenAcquisitionError, match="empty token"):
            provider.handle([OAuthBearerTokenCallback()])

    def test_timeout(self, monkeypatch):
        monkeypatch.setattr(managed_identity, "TOKEN_ACQUISITION_TIMEOUT_SECONDS", 0.05)
        release = threading.Event()

        def slow_get_token(*scopes, **kwargs):
            release.wait(5)
            return AccessToken("late", EXPIRES_ON)

        provider, _, _ = make_provider(side_effect=slow_get_token)
        configured(provider, "broker1:9093")

        try:
            with pytest.raises(TokenAcquisitionTimeoutError) as exc_info:
                provider.handle([OAuthBearerTokenCallback()])
        finally:
            release.set()

        error = exc_info.value
        assert error.scope == "https://broker1:9093"
        assert error.timeout_seconds == 0.05
        assert error.category == ErrorCategory.TRANSIENT
        assert error.is_retryable

    def test_timeout_raised_by_credential_is_a_failure(self):
        provider, _, _ = make_provider(side_effect=TimeoutError("socket read timed out after 0.1s"))
        configured(provider, "broker1:9093")

        with pytest.raises(TokenAcquisitionError) as exc_info:
            provider.handle([OAuthBearerTokenCallback()])

        error = exc_info.value
        assert not isinstance(error, TokenAcquisitionTimeoutError)
        assert isinstance(error.__cause__, TimeoutError)
        assert error.category == ErrorCategory.AUTH
        assert str(error).startswith("Failed to acquire managed identity token")

    def test_default_timeout_is_two_seconds(self):
        assert managed_identity.TOKEN_ACQUISITION_TIMEOUT_SECONDS == 2

    def test_hung_credential_fails_after_two_seconds(self):
        release = threading.Event()

        def hung_get_token(*scopes, **kwargs):
            release.wait(10)
            return AccessToken("late", EXPIRES_ON)

        provider, _, _ = make_provider(side_effect=hung_get_token)
        configured(provider, "broker1:9093")

        start = time.monotonic()
        try:
            with pytest.raises(TokenAcquisitionTimeoutError) as exc_info:
                provider.handle([OAuthBearerTokenCallback()])
        finally:
            elapsed = time.monotonic() - start
            release.set()

        assert exc_info.value.timeout_seconds == 2
        assert 1.9 <= elapsed < 4

    def test_token_value_is_not_logged(self, caplog):
        provider, _, _ = make_provider(token="super-secret-token")
        configured(provider)

        with caplog.at_level("DEBUG"):
            provider.handle([OAuthBearerTokenCallback()])

        assert "super-secret-token" not in caplog.text

    def test_token_value_is_not_in_repr(self):
        handle = TokenHandle(value="super-secret-token", lifetime_ms=1)

        assert "super-secret-token" not in repr(handle)


def test_close_is_a_no_op():
    credential_factory = MagicMock()
    provider = ManagedIdentityTokenProvider(credential_factory=credential_factory)

    provider.close()
    provider.close()

    credential_factory.assert_not_called()


def test_default_credential_uses_bounded_transport_timeouts(monkeypatch):
    credential_class = Mock()
    monkeypatch.setattr(managed_identity, "ManagedIdentityCredential", credential_class)

    credential = managed_identity.create_managed_identity_credential()

    assert credential is credential_class.return_value
    credential_class.assert_called_once_with(connection_timeout=2, read_timeout=2)


def test_default_credential_factory():
    provider = ManagedIdentityTokenProvider()

    assert provider._credential_factory is managed_identity.create_managed_identity_credential
