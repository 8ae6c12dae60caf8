"""Outbound message assembly.

Builds a ready-to-send EmailMessage from a rendered body: sender, recipient,
subject, idempotency headers and attachments. Attachments are read eagerly so
that a missing file fails the request before anything reaches the transport.
"""

import logging
import mimetypes
import re
from email.message import EmailMessage
from typing import Iterable, List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from event_mailer.utils.timestamps import DispatchClock

from .models import (
    Attachment,
    AttachmentUnavailable,
    InvalidHeaderError,
    InvalidRecipientError,
)

logger = logging.getLogger(__name__)

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

# Shared so tokens stay strictly increasing across assemblers in one process
_default_clock = DispatchClock()


def parse_recipient(address: str) -> str:
    """Validate and normalize a single recipient address.

    Raises:
        InvalidRecipientError: If the address is not a valid email address
    """
    try:
        return validate_email(address.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise InvalidRecipientError(f"Invalid recipient address '{address}': {e}") from e


def single_line(text: str) -> str:
    """Collapse every run of whitespace, CR and LF included, to one space."""
    return " ".join(text.split())


def format_sender(display_name: str, address: str) -> str:
    """Build a From header value, e.g. ``"Agneepath" <events@example.com>``."""
    escaped = single_line(display_name).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}" <{address}>'


def resolve_attachment(attachment: Attachment) -> Tuple[bytes, str, str]:
    """Read attachment bytes and determine its MIME type.

    Returns:
        Tuple of (data, maintype, subtype)

    Raises:
        AttachmentUnavailable: If the backing file cannot be read
    """
    if attachment.content is not None:
        data = attachment.content
    else:
        try:
            data = attachment.path.read_bytes()
        except OSError as e:
            raise AttachmentUnavailable(
                f"Attachment {attachment.filename} unavailable at {attachment.path}: {e}"
            ) from e

    content_type = (
        attachment.content_type
        or mimetypes.guess_type(attachment.filename)[0]
        or "application/octet-stream"
    )
    maintype, _, subtype = content_type.partition("/")
    return data, maintype, subtype or "octet-stream"


class MessageAssembler:
    """Builds EmailMessage objects with per-dispatch idempotency headers."""

    def __init__(self, message_id_domain: str, clock: Optional[DispatchClock] = None):
        """Initialize the assembler.

        Args:
            message_id_domain: Domain used on the right of Message-ID tokens
            clock: Source of strictly increasing dispatch timestamps
        """
        self.message_id_domain = message_id_domain
        self.clock = clock or _default_clock

    def make_token(self, prefix: str, stable_id: str) -> str:
        """Build a unique Message-ID for one dispatch of a logical event.

        The stable identifier keeps dispatches for the same event traceable;
        the timestamp keeps each dispatch distinct so mail clients do not
        fold them into one thread.

        Example:
            ``<verify-5f2b9c-1760870400123@agneepath.co.in>``
        """
        safe_id = _UNSAFE_ID_CHARS.sub("-", stable_id).strip("-") or "anonymous"
        return f"<{prefix}-{safe_id}-{self.clock.next_millis()}@{self.message_id_domain}>"

    def assemble(
        self,
        body: str,
        recipient: str,
        subject: str,
        sender: str,
        idempotency_key: str,
        attachments: Iterable[Attachment] = (),
    ) -> EmailMessage:
        """Assemble the outbound message.

        Args:
            body: Rendered HTML body
            recipient: Recipient address (validated here)
            subject: Rendered subject line
            sender: From header value
            idempotency_key: Token from make_token(), used as Message-ID
            attachments: Files to attach; inline ones are embedded as
                related parts addressable with ``cid:<content_id>``

        Returns:
            Fully built EmailMessage

        Raises:
            InvalidRecipientError: If recipient is not a valid address
            AttachmentUnavailable: If an attachment cannot be read
            InvalidHeaderError: If a header value is rejected by the email policy
        """
        to_address = parse_recipient(recipient)

        resolved: List[Tuple[Attachment, bytes, str, str]] = [
            (attachment, *resolve_attachment(attachment)) for attachment in attachments
        ]

        message = EmailMessage()
        try:
            message["Subject"] = single_line(subject)
            message["From"] = sender
            message["To"] = to_address
            message["Message-ID"] = idempotency_key
            message["X-Entity-Ref-ID"] = idempotency_key
        except ValueError as e:
            raise InvalidHeaderError(f"Invalid header value: {e}") from e
        message["X-Gm-NoSave"] = "1"
        message.set_content(body, subtype="html")

        for attachment, data, maintype, subtype in resolved:
            if attachment.is_inline:
                message.add_related(
                    data,
                    maintype=maintype,
                    subtype=subtype,
                    cid=f"<{attachment.content_id}>",
                    filename=attachment.filename,
                )

        for attachment, data, maintype, subtype in resolved:
            if not attachment.is_inline:
                message.add_attachment(
                    data, maintype=maintype, subtype=subtype, filename=attachment.filename
                )

        logger.debug(
            f"Assembled message {idempotency_key} with {len(resolved)} attachment(s)",
            extra={"event": "notification.assembled", "message_id": idempotency_key},
        )
        return message
