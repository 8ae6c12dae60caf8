"""Notification composition and delivery.

This package provides the complete notification pipeline:
- NotificationService: Orchestrates verification, registration, payment and
  signup notifications and maps outcomes to result codes
- TemplateStore: Resolves named templates (cached process-wide)
- PlaceholderEngine: Renders {{token}} and {{#if}} markers
- Generators: Build table rows for coaches, players, fees and accommodation
- MessageAssembler: Builds EmailMessage objects with idempotency headers
- DeliveryDispatcher / SMTPClient: Single-attempt SMTP delivery with a
  per-type failure policy
"""

from .assembler import MessageAssembler, format_sender, parse_recipient
from .dispatcher import DeliveryDispatcher
from .formatting import Money, ValueFormatter, format_label, group_digits
from .generators import (
    accommodation_rows,
    attachment_list,
    coach_rows,
    player_rows,
    sports_cost_rows,
)
from .links import LinkCipher, build_verification_link
from .models import (
    Attachment,
    AttachmentUnavailable,
    DispatchOutcome,
    GeneratedFragment,
    InvalidHeaderError,
    InvalidRecipientError,
    MalformedTemplate,
    NotificationError,
    NotificationRequest,
    NotificationResult,
    NotificationTemplateError,
    NotificationType,
    ResultCode,
    SMTPDeliveryError,
    TemplateNotFound,
    TemplateUnreadable,
)
from .placeholders import PlaceholderEngine, parse_template
from .policies import DEFAULT_POLICIES, NotificationPolicy
from .service import NotificationService
from .smtp_client import SMTPClient
from .template_store import TemplateId, TemplateStore

__all__ = [
    # Main service
    "NotificationService",
    # Models and results
    "Attachment",
    "DispatchOutcome",
    "GeneratedFragment",
    "NotificationRequest",
    "NotificationResult",
    "NotificationType",
    "ResultCode",
    # Policies
    "DEFAULT_POLICIES",
    "NotificationPolicy",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "TemplateNotFound",
    "TemplateUnreadable",
    "MalformedTemplate",
    "AttachmentUnavailable",
    "InvalidRecipientError",
    "InvalidHeaderError",
    "SMTPDeliveryError",
    # Components
    "TemplateId",
    "TemplateStore",
    "PlaceholderEngine",
    "MessageAssembler",
    "DeliveryDispatcher",
    "SMTPClient",
    "LinkCipher",
    "ValueFormatter",
    "Money",
    # Utilities
    "accommodation_rows",
    "attachment_list",
    "build_verification_link",
    "coach_rows",
    "format_label",
    "format_sender",
    "group_digits",
    "parse_recipient",
    "parse_template",
    "player_rows",
    "sports_cost_rows",
]
