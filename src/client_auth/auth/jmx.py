"""JMX port authentication."""

from typing import Optional

from client_auth.models import JmxAuthentication, JmxAuthenticationPassword


def resolve_jmx_authenticated(
    authentication: Optional[JmxAuthentication], current: bool = False
) -> bool:
    """
    Decide whether the JMX port requires authentication.

    Password authentication turns it on and no authentication turns it off.
    Any other descriptor leaves ``current`` unchanged.
    """
    if authentication is None:
        return False
    if isinstance(authentication, JmxAuthenticationPassword):
        return True
    return current


__all__ = ["resolve_jmx_authenticated"]
