"""Per-notification-type composition and failure policy."""

from dataclasses import dataclass
from typing import Dict, Optional

from .models import NotificationType
from .template_store import TemplateId


@dataclass(frozen=True)
class NotificationPolicy:
    """How one notification type is composed and how its failures surface.

    Attributes:
        template_id: Body template
        subject: Subject template (same marker language as bodies)
        sender_name: Display name template for the From header; ``None`` uses the
            event's site name
        token_prefix: Prefix of the Message-ID idempotency token
        propagate_failure: Surface delivery failure to the caller when True;
            log and swallow it when False (best-effort notifications)
    """

    template_id: TemplateId
    subject: str
    token_prefix: str
    propagate_failure: bool
    sender_name: Optional[str] = None


DEFAULT_POLICIES: Dict[NotificationType, NotificationPolicy] = {
    NotificationType.VERIFICATION: NotificationPolicy(
        template_id=TemplateId.VERIFICATION,
        subject="Verify your account - {{eventName}}",
        token_prefix="verify",
        propagate_failure=True,
    ),
    NotificationType.REGISTRATION: NotificationPolicy(
        template_id=TemplateId.REGISTRATION,
        subject="Thank you for registering for {{eventName}} ({{universityName}})",
        token_prefix="registration",
        propagate_failure=True,
        sender_name="Registration",
    ),
    NotificationType.PAYMENT: NotificationPolicy(
        template_id=TemplateId.PAYMENT_UNCONFIRMED,
        subject="Payment Confirmation - Transaction ID: {{transactionId}}",
        token_prefix="payment",
        propagate_failure=True,
        sender_name="{{siteName}} Payments",
    ),
    NotificationType.SIGNUP: NotificationPolicy(
        template_id=TemplateId.SIGNUP,
        subject="Welcome to {{siteName}}! \U0001f389",
        token_prefix="signup",
        propagate_failure=False,
    ),
}
