"""
aiokafka SASL/OAUTHBEARER adapter for the managed identity token provider.

Example:
    >>> from aiokafka import AIOKafkaProducer
    >>> token_provider = create_aiokafka_token_provider("broker1.servicebus.windows.net:9093")
    >>> producer = AIOKafkaProducer(
    ...     bootstrap_servers="broker1.servicebus.windows.net:9093",
    ...     security_protocol="SASL_SSL",
    ...     sasl_mechanism="OAUTHBEARER",
    ...     sasl_oauth_token_provider=token_provider,
    ... )
"""

import asyncio
import logging
from typing import Optional

from aiokafka.abc import AbstractTokenProvider

from client_auth.auth.managed_identity import (
    BOOTSTRAP_SERVERS_CONFIG,
    ManagedIdentityTokenProvider,
    OAuthBearerTokenCallback,
)
from client_auth.errors import TokenAcquisitionError

logger = logging.getLogger(__name__)


class ManagedIdentityAioTokenProvider(AbstractTokenProvider):
    """
    Token provider aiokafka calls whenever it authenticates a connection.

    The blocking token request runs in the default executor so the event
    loop is never held for the acquisition timeout.
    """

    def __init__(self, provider: ManagedIdentityTokenProvider):
        self._provider = provider

    @property
    def provider(self) -> ManagedIdentityTokenProvider:
        return self._provider

    async def token(self) -> str:
        callback = OAuthBearerTokenCallback()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._provider.handle, [callback])
        if callback.token is None:
            raise TokenAcquisitionError("Token provider did not populate the callback")
        return callback.token.value


def create_aiokafka_token_provider(
    bootstrap_servers: str,
    provider: Optional[ManagedIdentityTokenProvider] = None,
) -> ManagedIdentityAioTokenProvider:
    """
    Configure a managed identity provider and wrap it for aiokafka.

    Raises:
        MisconfiguredEndpointError: If bootstrap_servers is not exactly one endpoint
    """
    provider = provider or ManagedIdentityTokenProvider()
    provider.configure({BOOTSTRAP_SERVERS_CONFIG: bootstrap_servers}, mechanism="OAUTHBEARER")
    logger.info("Created aiokafka managed identity token provider", extra={"scope": provider.scope})
    return ManagedIdentityAioTokenProvider(provider)


__all__ = [
    "ManagedIdentityAioTokenProvider",
    "create_aiokafka_token_provider",
]
