"""Request context carried into audit records and log entries."""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

import structlog

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
ip_address_var: ContextVar[Optional[str]] = ContextVar("ip_address", default=None)
user_agent_var: ContextVar[Optional[str]] = ContextVar("user_agent", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


def get_ip_address() -> Optional[str]:
    return ip_address_var.get()


def get_user_agent() -> Optional[str]:
    return user_agent_var.get()


@contextmanager
def request_context(
    request_id: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Generator[str, None, None]:
    """
    Bind caller metadata for the duration of a block.

    The request ID is generated when not supplied and is also bound into
    structlog's context variables so every log line carries it.

    Yields:
        The request ID in effect
    """
    request_id = request_id or str(uuid.uuid4())

    tokens = [
        (request_id_var, request_id_var.set(request_id)),
        (ip_address_var, ip_address_var.set(ip_address)),
        (user_agent_var, user_agent_var.set(user_agent)),
    ]
    bound = structlog.contextvars.bind_contextvars(request_id=request_id)

    try:
        yield request_id
    finally:
        structlog.contextvars.reset_contextvars(**bound)
        for var, token in reversed(tokens):
            var.reset(token)
