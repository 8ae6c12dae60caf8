"""Delivery dispatcher.

Hands assembled messages to the mail transport exactly once and applies the
notification type's failure policy. There is no retry, queue or backoff
here; a caller that wants another attempt calls dispatch() again.
"""

import logging
from email.message import EmailMessage
from typing import Optional

from event_mailer.logging import get_logger, mask_email

from .models import DispatchOutcome, SMTPDeliveryError
from .policies import NotificationPolicy
from .smtp_client import SMTPClient

logger = get_logger(__name__, component="dispatcher")


class DeliveryDispatcher:
    """Sends messages and turns transport failures into DispatchOutcome values."""

    def __init__(self, transport: SMTPClient, logger_instance: Optional[logging.Logger] = None):
        """Initialize the dispatcher.

        Args:
            transport: Configured SMTP client
            logger_instance: Logger instance (uses module logger if None)
        """
        self.transport = transport
        self.logger = logger_instance or logger

    def dispatch(self, message: EmailMessage, policy: NotificationPolicy) -> DispatchOutcome:
        """Attempt delivery once. Blocks until the transport returns.

        Args:
            message: Fully assembled message
            policy: Policy of the notification type being sent

        Returns:
            DispatchOutcome; on failure ``suppressed`` reflects whether the
            policy swallows the failure
        """
        recipient = mask_email(message["To"])
        message_id = message["Message-ID"]

        try:
            self.transport.send(message)
        except SMTPDeliveryError as e:
            if policy.propagate_failure:
                self.logger.error(
                    f"Delivery of {message_id} to {recipient} failed: {e}",
                    exc_info=True,
                    extra={
                        "event": "notification.send.failure",
                        "message_id": message_id,
                        "recipient": recipient,
                        "error_type": type(e).__name__,
                    },
                )
            else:
                self.logger.warning(
                    f"Best-effort delivery of {message_id} to {recipient} failed: {e}",
                    extra={
                        "event": "notification.send.suppressed",
                        "message_id": message_id,
                        "recipient": recipient,
                        "error_type": type(e).__name__,
                    },
                )
            return DispatchOutcome(
                delivered=False,
                error_kind=e.kind,
                error=str(e),
                suppressed=not policy.propagate_failure,
            )

        self.logger.info(
            f"Message {message_id} sent to {recipient}",
            extra={
                "event": "notification.send.success",
                "message_id": message_id,
                "recipient": recipient,
            },
        )
        return DispatchOutcome(delivered=True)
