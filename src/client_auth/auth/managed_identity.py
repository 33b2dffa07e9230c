"""
Azure managed identity token provider for SASL/OAUTHBEARER.

The Kafka client runtime configures the provider once with its bootstrap
servers and then hands it OAuthBearerTokenCallback objects whenever it
needs a bearer token. Each callback gets a freshly acquired token; nothing
is cached between calls and nothing is retried. The client decides when to
ask again.

The token scope is derived from the single bootstrap endpoint, e.g.
``[broker1.servicebus.windows.net:9093]`` -> ``https://broker1.servicebus.windows.net:9093``.

Example:
    >>> provider = ManagedIdentityTokenProvider()
    >>> provider.configure({"bootstrap.servers": "broker1:9093"})
    >>> callback = OAuthBearerTokenCallback()
    >>> provider.handle([callback])
    >>> callback.token.lifetime_ms

Security Notes:
    - Token values are never logged
    - A credential that does not answer in time is abandoned, not awaited
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional
from urllib.parse import urlparse

from azure.identity import ManagedIdentityCredential

from client_auth.errors import (
    MisconfiguredEndpointError,
    TokenAcquisitionError,
    TokenAcquisitionTimeoutError,
    UnsupportedCallbackError,
)
from client_auth.logging.utilities import log_exception
from client_auth.types import AccessTokenLike, TokenCredentialLike

logger = logging.getLogger(__name__)

# Upper bound on one token request; read at call time
TOKEN_ACQUISITION_TIMEOUT_SECONDS = 2

BOOTSTRAP_SERVERS_CONFIG = "bootstrap.servers"
_BOOTSTRAP_SERVERS_ALIAS = "bootstrap_servers"


def create_managed_identity_credential() -> ManagedIdentityCredential:
    """
    Default credential factory.

    Transport connection and read timeouts match the acquisition timeout,
    which bounds how long an abandoned request holds its worker thread.
    """
    return ManagedIdentityCredential(
        connection_timeout=TOKEN_ACQUISITION_TIMEOUT_SECONDS,
        read_timeout=TOKEN_ACQUISITION_TIMEOUT_SECONDS,
    )


@dataclass(frozen=True)
class TokenHandle:
    """
    Bearer token handed back to the Kafka client.

    Attributes:
        value: Opaque bearer token
        lifetime_ms: Absolute expiry in milliseconds since the epoch
        scope: Granted scopes (always empty for managed identity tokens)
        principal_name: Not populated for managed identity tokens
        start_time_ms: Not populated for managed identity tokens
    """

    value: str = field(repr=False)
    lifetime_ms: int
    scope: frozenset = frozenset()
    principal_name: Optional[str] = None
    start_time_ms: Optional[int] = None


class OAuthBearerTokenCallback:
    """Request for a bearer token; handle() fills in ``token``."""

    def __init__(self) -> None:
        self.token: Optional[TokenHandle] = None


def _split_bootstrap_servers(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return [str(item).strip() for item in items if str(item).strip()]


class ManagedIdentityTokenProvider:
    """
    Login callback handler that exchanges the host's managed identity for a token.

    Args:
        credential_factory: Creates the credential used for one acquisition.
            Defaults to an azure.identity.ManagedIdentityCredential whose
            transport timeouts match the acquisition timeout.
    """

    def __init__(
        self,
        credential_factory: Callable[[], TokenCredentialLike] = create_managed_identity_credential,
    ):
        self._credential_factory = credential_factory
        self._scope: Optional[str] = None

    @property
    def scope(self) -> Optional[str]:
        return self._scope

    @property
    def is_configured(self) -> bool:
        return self._scope is not None

    def configure(
        self,
        configs: Mapping[str, Any],
        mechanism: Optional[str] = None,
        jaas_config_entries: Optional[Iterable[Any]] = None,
    ) -> None:
        """
        Derive the token scope from the client configuration.

        Args:
            configs: Client configuration; must name exactly one bootstrap server
            mechanism: SASL mechanism (unused)
            jaas_config_entries: JAAS entries (unused)

        Raises:
            MisconfiguredEndpointError: If zero or several endpoints are configured
        """
        raw = configs.get(BOOTSTRAP_SERVERS_CONFIG)
        if raw is None:
            raw = configs.get(_BOOTSTRAP_SERVERS_ALIAS)
        endpoints = _split_bootstrap_servers(raw)

        if len(endpoints) != 1:
            logger.error(
                "Managed identity token provider needs exactly one bootstrap endpoint",
                extra={"endpoint_count": len(endpoints)},
            )
            raise MisconfiguredEndpointError(
                f"Expected exactly one bootstrap endpoint, got {len(endpoints)}",
                endpoints=endpoints,
            )

        self._scope = self.parse_scope(endpoints[0])
        logger.info(
            "Configured managed identity token provider",
            extra={"scope": self._scope, "sasl_mechanism": mechanism},
        )

    @staticmethod
    def parse_scope(bootstrap_server: str) -> str:
        """
        Turn a bootstrap endpoint into the token scope.

        Brackets are stripped, https:// is prefixed and the result is reduced
        to scheme and authority (host plus port when present).
        """
        cleaned = bootstrap_server.strip().replace("[", "").replace("]", "")
        parsed = urlparse(f"https://{cleaned}")
        return f"{parsed.scheme}://{parsed.netloc}"

    def handle(self, callbacks: Iterable[Any]) -> None:
        """
        Satisfy token callbacks from the Kafka client.

        Raises:
            MisconfiguredEndpointError: If configure() has not succeeded
            UnsupportedCallbackError: For any callback other than OAuthBearerTokenCallback
            TokenAcquisitionError: If the credential fails or returns no token
            TokenAcquisitionTimeoutError: If no token arrives in time
        """
        if self._scope is None:
            raise MisconfiguredEndpointError(
                "Token provider used before a bootstrap endpoint was configured"
            )

        for callback in callbacks:
            if not isinstance(callback, OAuthBearerTokenCallback):
                logger.error(
                    "Unsupported callback",
                    extra={"callback_type": type(callback).__name__},
                )
                raise UnsupportedCallbackError(callback)
            callback.token = self._acquire_token(self._scope)

    def _acquire_token(self, scope: str) -> TokenHandle:
        timeout = TOKEN_ACQUISITION_TIMEOUT_SECONDS
        start = time.perf_counter()

        pool = ThreadPoolExecutor(max_workers=1)
        try:
            future = pool.submit(self._request_token, scope)
            done, _ = wait([future], timeout=timeout)
            if not done:
                logger.warning(
                    "Timed out acquiring managed identity token",
                    extra={"scope": scope, "timeout_seconds": timeout},
                )
                raise TokenAcquisitionTimeoutError(scope, timeout)

            # The credential finished; a TimeoutError raised inside it is a failure
            try:
                access_token = future.result()
            except Exception as e:
                log_exception(
                    logger, e, "Failed to acquire managed identity token",
                    include_traceback=False, scope=scope,
                )
                raise TokenAcquisitionError(
                    f"Failed to acquire managed identity token for scope '{scope}'",
                    cause=e,
                    context={"scope": scope},
                ) from e
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        if access_token is None or not access_token.token:
            raise TokenAcquisitionError(
                f"Managed identity returned an empty token for scope '{scope}'",
                context={"scope": scope},
            )

        handle = TokenHandle(
            value=access_token.token,
            lifetime_ms=int(access_token.expires_on) * 1000,
        )
        logger.debug(
            "Acquired managed identity token",
            extra={
                "scope": scope,
                "expires_at_ms": handle.lifetime_ms,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return handle

    def _request_token(self, scope: str) -> AccessTokenLike:
        credential = self._credential_factory()
        try:
            return credential.get_token(scope)
        finally:
            close = getattr(credential, "close", None)
            if callable(close):
                close()

    def close(self) -> None:
        """Nothing to release; credentials live only for one acquisition."""


__all__ = [
    "TOKEN_ACQUISITION_TIMEOUT_SECONDS",
    "BOOTSTRAP_SERVERS_CONFIG",
    "create_managed_identity_credential",
    "TokenHandle",
    "OAuthBearerTokenCallback",
    "ManagedIdentityTokenProvider",
]
