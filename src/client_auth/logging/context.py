"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_component: ContextVar[str] = ContextVar("component", default="")
_auth_type: ContextVar[str] = ContextVar("auth_type", default="")
_resource_name: ContextVar[str] = ContextVar("resource_name", default="")


def set_log_context(
    component: Optional[str] = None,
    auth_type: Optional[str] = None,
    resource_name: Optional[str] = None,
) -> None:
    if component is not None:
        _component.set(component)
    if auth_type is not None:
        _auth_type.set(auth_type)
    if resource_name is not None:
        _resource_name.set(resource_name)


def get_log_context() -> Dict[str, str]:
    return {
        "component": _component.get(),
        "auth_type": _auth_type.get(),
        "resource_name": _resource_name.get(),
    }


def clear_log_context() -> None:
    _component.set("")
    _auth_type.set("")
    _resource_name.set("")


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(component="mirror-maker", resource_name="my-mirror"):
            # All logs in this block carry component and resource_name
            resolve_client_authentication(...)
    """

    def __init__(
        self,
        component: Optional[str] = None,
        auth_type: Optional[str] = None,
        resource_name: Optional[str] = None,
    ):
        self.new_context = {
            "component": component,
            "auth_type": auth_type,
            "resource_name": resource_name,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        set_log_context(**self.new_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_log_context(**self.old_context)
        return False
