"""Structured logging helpers for the event mailer.

Loggers obtained through get_logger() carry a fixed ``component`` field, and
any fields pushed with log_context() are attached to every record emitted in
that scope.
"""

import logging
from typing import Optional, Union

from .context import log_context, mask_email


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its component field with per-call extras."""

    def process(self, msg, kwargs):
        # Per-call extras win over the adapter's defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally tagging every record with a component name.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into all records

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="dispatcher")
        >>> logger.info("Sent", extra={"event": "notification.send.success"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger


__all__ = ["ComponentLoggerAdapter", "get_logger", "log_context", "mask_email"]
