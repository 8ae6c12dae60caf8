"""Data models and exceptions for the notification subsystem.

This module defines the request/result types exchanged between the
orchestrator, the assembler and the dispatcher, plus the exception taxonomy
used for composition and delivery failures.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from markupsafe import Markup


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    #: Short machine-readable name reported in NotificationResult.error_kind
    kind = "notification_error"


class NotificationTemplateError(NotificationError):
    """Base class for template resolution and rendering failures."""

    kind = "template_error"


class TemplateNotFound(NotificationTemplateError):
    """Raised when a template identifier has no backing resource."""

    kind = "template_not_found"


class TemplateUnreadable(NotificationTemplateError):
    """Raised when a template resource exists but cannot be read."""

    kind = "template_unreadable"


class MalformedTemplate(NotificationTemplateError):
    """Raised when conditional block markers are unbalanced or misplaced."""

    kind = "malformed_template"

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        super().__init__(f"{message} (line {line})" if line is not None else message)


class AttachmentUnavailable(NotificationError):
    """Raised when an attachment source cannot be read during assembly."""

    kind = "attachment_unavailable"


class InvalidRecipientError(NotificationError):
    """Raised when the recipient address is not a valid email address."""

    kind = "invalid_recipient"


class InvalidHeaderError(NotificationError):
    """Raised when a rendered header value cannot be placed on the message."""

    kind = "invalid_header"


class SMTPDeliveryError(NotificationError):
    """Raised by the transport when the SMTP exchange fails."""

    kind = "delivery_failed"


class NotificationType(str, Enum):
    """Kinds of transactional notification the platform sends."""

    VERIFICATION = "verification"
    REGISTRATION = "registration"
    PAYMENT = "payment"
    SIGNUP = "signup"


class ResultCode(str, Enum):
    """Caller-visible outcome of an orchestrated notification."""

    SUCCESS = "success"
    ALREADY_SATISFIED = "already-satisfied"
    NOT_FOUND = "not-found"
    PRECONDITION_MISSING = "precondition-missing"
    DELIVERY_FAILED = "delivery-failed"


class GeneratedFragment(Markup):
    """Pre-rendered HTML inserted verbatim; never scanned for placeholders."""

    __slots__ = ()


@dataclass(frozen=True)
class Attachment:
    """A file to send with a message.

    Exactly one of ``content`` (inline bytes) or ``path`` must be given.
    ``content_id`` marks the attachment for inline embedding (``cid:`` URLs).
    """

    filename: str
    content: Optional[bytes] = None
    path: Optional[Path] = None
    content_type: Optional[str] = None
    content_id: Optional[str] = None

    def __post_init__(self):
        if (self.content is None) == (self.path is None):
            raise ValueError("Attachment needs exactly one of content or path")

    @property
    def is_inline(self) -> bool:
        return self.content_id is not None


@dataclass(frozen=True)
class NotificationRequest:
    """Everything needed to compose one notification.

    Built per triggering event by the orchestrator and discarded after
    dispatch. ``stable_id`` seeds the idempotency token; ``template_name``
    overrides the template chosen by the type's policy.
    """

    type: NotificationType
    recipient_email: str
    context: Mapping[str, Any]
    stable_id: str
    attachments: Tuple[Attachment, ...] = ()
    template_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))
        object.__setattr__(self, "attachments", tuple(self.attachments))


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of handing one message to the mail transport.

    ``suppressed`` is set when delivery failed for a best-effort
    notification and the failure was logged instead of surfaced.
    """

    delivered: bool
    error_kind: Optional[str] = None
    error: Optional[str] = None
    suppressed: bool = False


@dataclass
class NotificationResult:
    """Outcome of an orchestrated notification, mapped to HTTP by the caller.

    Attributes:
        notification_type: Which flow produced the result
        code: Caller-visible result code
        message_id: Message-ID header of the dispatched message, if composed
        error_kind: Machine-readable failure kind (e.g. "template_not_found")
        error: Human-readable failure description
    """

    notification_type: NotificationType
    code: ResultCode
    message_id: Optional[str] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None

    def is_success(self) -> bool:
        """True for success and already-satisfied outcomes."""
        return self.code in (ResultCode.SUCCESS, ResultCode.ALREADY_SATISFIED)
