"""Scoped logging context.

Fields pushed here are picked up by the ContextualFilter installed by
configure_logging() and attached to every record emitted inside the scope.
Backed by contextvars, so concurrent dispatches never see each other's fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_log_context: ContextVar[Dict[str, Any]] = ContextVar("event_mailer_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(_log_context.get())


def push_log_context(**fields) -> Token:
    """Merge fields into the current context; undo with pop_log_context()."""
    return _log_context.set({**_log_context.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by the matching push_log_context() call."""
    _log_context.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Used by tests."""
    _log_context.set({})


class log_context:
    """Context manager pushing fields for the duration of a block.

    Example:
        >>> with log_context(notification_type="signup", notification_id="n-1"):
        ...     logger.info("Composing message")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False


def mask_email(address: Optional[str]) -> str:
    """Mask the local part of an address for log output.

    Example:
        >>> mask_email("ada@example.com")
        'a**@example.com'
    """
    if not address:
        return ""
    local, sep, domain = address.partition("@")
    if not sep:
        return "*" * len(address)
    if len(local) <= 1:
        return f"*@{domain}"
    return f"{local[0]}{'*' * (len(local) - 1)}@{domain}"
