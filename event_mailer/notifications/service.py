"""Notification orchestrator.

NotificationService runs each notification through the same steps:
precondition checks (verification only), context building, template
rendering, message assembly and a single dispatch attempt. Every outcome is
reported as a NotificationResult; per-request failures never raise.

Failure policy is per notification type (see policies.py): verification,
registration and payment failures are reported as ``delivery-failed``,
while a failed signup welcome is logged and still reported as ``success``
so the signup itself is never blocked.
"""

import logging
from email.message import EmailMessage
from typing import Any, Dict, Mapping, Optional

from event_mailer.config.environment import EnvironmentConfig
from event_mailer.config.exceptions import ConfigurationError
from event_mailer.config.models import AppConfig
from event_mailer.domain.models import PaymentForm, RegistrationForm, SignupDetails
from event_mailer.logging import get_logger, log_context, mask_email
from event_mailer.records import RecordStore
from event_mailer.utils.hashing import short_digest
from event_mailer.utils.timestamps import utc_now

from .assembler import MessageAssembler, format_sender
from .dispatcher import DeliveryDispatcher
from .formatting import ValueFormatter
from .links import LinkCipher, build_verification_link
from .models import (
    Attachment,
    NotificationError,
    NotificationRequest,
    NotificationResult,
    NotificationType,
    ResultCode,
)
from .payloads import (
    SIGNUP_DEFAULTS,
    build_payment_context,
    build_registration_context,
    build_signup_context,
    build_verification_context,
)
from .placeholders import PlaceholderEngine
from .policies import DEFAULT_POLICIES, NotificationPolicy
from .smtp_client import SMTPClient
from .template_store import TemplateId, TemplateStore

logger = get_logger(__name__, component="notification")

LOGO_CONTENT_ID = "unique-image-cid"
PAYMENT_PROOF_BASENAME = "payment-proof"

_DEFAULTS_BY_TYPE: Dict[NotificationType, Mapping[str, Any]] = {
    NotificationType.SIGNUP: SIGNUP_DEFAULTS,
}


class NotificationService:
    """Composes and dispatches transactional notifications.

    Built once at process start from the loaded configuration. Holds no
    per-request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        record_store: Optional[RecordStore] = None,
        template_store: Optional[TemplateStore] = None,
        smtp_client: Optional[SMTPClient] = None,
        dispatcher: Optional[DeliveryDispatcher] = None,
        assembler: Optional[MessageAssembler] = None,
        policies: Optional[Mapping[NotificationType, NotificationPolicy]] = None,
        clock=utc_now,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the notification service.

        Args:
            app_config: Application configuration
            env_config: Environment configuration (SMTP, ROOT_URL, link key)
            record_store: User lookup, required for verification emails
            template_store: Template store (packaged templates if None)
            smtp_client: SMTP client (built from env_config if None)
            dispatcher: Dispatcher (wraps smtp_client if None)
            assembler: Message assembler (uses the event's Message-ID domain if None)
            policies: Per-type policies (DEFAULT_POLICIES if None)
            clock: Returns the current UTC datetime
            logger_instance: Logger instance (uses module logger if None)

        Raises:
            ConfigurationError: If the SMTP transport cannot be configured
        """
        self.app_config = app_config
        self.env_config = env_config
        self.record_store = record_store
        self.policies = dict(policies or DEFAULT_POLICIES)
        self.clock = clock
        self.logger = logger_instance or logger

        self.formatter = ValueFormatter(
            timezone_name=app_config.event.timezone,
            currency_symbol=app_config.fees.currency_symbol,
            grouping=app_config.fees.digit_grouping,
        )
        self.engine = PlaceholderEngine(self.formatter)
        self.template_store = template_store or TemplateStore(app_config.email.templates_dir)
        self.assembler = assembler or MessageAssembler(app_config.event.message_id_domain)
        if dispatcher is None:
            transport = smtp_client or SMTPClient(env_config, use_tls=app_config.email.use_tls)
            dispatcher = DeliveryDispatcher(transport)
        self.dispatcher = dispatcher
        self.cipher = LinkCipher(env_config.verification_link_key)

    # ------------------------------------------------------------------
    # Notification flows
    # ------------------------------------------------------------------

    def send_verification(self, email: str) -> NotificationResult:
        """Send the account verification link to a registered user.

        Returns:
            ``not-found`` if no user has this address, ``already-satisfied``
            if the user is verified, ``precondition-missing`` if the user has
            no verification id, otherwise the delivery result
        """
        kind = NotificationType.VERIFICATION
        if self.record_store is None:
            raise ConfigurationError("A record store is required for verification emails")

        with log_context(notification_type=kind.value, recipient=mask_email(email)):
            record = self.record_store.find_by_email(email)

            if record is None:
                self.logger.info(
                    "Skipping verification email - user not found",
                    extra={"event": "notification.skip", "reason": "user_not_found"},
                )
                return NotificationResult(kind, ResultCode.NOT_FOUND)

            if record.email_verified:
                self.logger.info(
                    "Skipping verification email - already verified",
                    extra={"event": "notification.skip", "reason": "already_verified"},
                )
                return NotificationResult(kind, ResultCode.ALREADY_SATISFIED)

            if not record.verification_id:
                self.logger.warning(
                    "Skipping verification email - no verification id on record",
                    extra={"event": "notification.skip", "reason": "verification_id_missing"},
                )
                return NotificationResult(
                    kind,
                    ResultCode.PRECONDITION_MISSING,
                    error_kind="verification_id_missing",
                    error="Verification id not found",
                )

            link = build_verification_link(
                self.env_config.root_url, record.email, record.verification_id, self.cipher
            )
            context = build_verification_context(link, self.app_config.event.name, self.clock())
            request = NotificationRequest(
                type=kind,
                recipient_email=record.email,
                context=context,
                stable_id=record.verification_id,
            )
            return self.deliver(request)

    def send_registration_confirmation(self, form: RegistrationForm) -> NotificationResult:
        """Confirm a team registration, attaching the bank details PDF if configured."""
        kind = NotificationType.REGISTRATION
        attachments = []
        if self.env_config.bank_details_pdf is not None:
            attachments.append(
                Attachment(
                    filename=self.app_config.email.bank_details_filename,
                    path=self.env_config.bank_details_pdf,
                    content_type="application/pdf",
                )
            )
        else:
            self.logger.warning(
                "BANK_DETAILS_PDF not configured; sending registration confirmation without it",
                extra={"event": "notification.attachment.skipped"},
            )

        context = build_registration_context(
            form, self.app_config.event.name, self.app_config.sport_name, self.formatter
        )
        request = NotificationRequest(
            type=kind,
            recipient_email=form.email,
            context=context,
            stable_id=form.id,
            attachments=attachments,
        )
        return self.deliver(request)

    def send_payment_confirmation(
        self, form: PaymentForm, confirmed: bool = False
    ) -> NotificationResult:
        """Acknowledge a submitted payment, or confirm it once verified by an admin.

        Args:
            form: Submitted payment details
            confirmed: Use the "payment confirmed" template instead of the
                "received, pending confirmation" one
        """
        kind = NotificationType.PAYMENT
        attachments = []
        if form.payment_proof is not None:
            proof = form.payment_proof
            attachments.append(
                Attachment(
                    filename=f"{PAYMENT_PROOF_BASENAME}{proof.extension}",
                    content=proof.content,
                    content_type=proof.content_type,
                )
            )

        context = build_payment_context(
            form,
            event_name=self.app_config.event.name,
            site_name=self.app_config.event.site_name,
            per_player_fee=self.app_config.fees.per_player_fee,
            sport_name=self.app_config.sport_name,
            formatter=self.formatter,
            attachments=attachments,
        )
        request = NotificationRequest(
            type=kind,
            recipient_email=form.email,
            context=context,
            stable_id=form.transaction_id,
            attachments=attachments,
            template_name=TemplateId.PAYMENT_CONFIRMATION.value if confirmed else None,
        )
        return self.deliver(request)

    def send_signup_welcome(self, details: SignupDetails) -> NotificationResult:
        """Welcome a new user. Best-effort: never raises.

        A delivery failure is logged and reported as success. Composition
        defects (missing template, unreadable logo) are logged at ERROR and
        reported as ``delivery-failed`` so they stay visible, but the caller
        is free to ignore the result.
        """
        kind = NotificationType.SIGNUP
        try:
            attachments = []
            if self.env_config.logo_path is not None:
                attachments.append(
                    Attachment(
                        filename=self.env_config.logo_path.name,
                        path=self.env_config.logo_path,
                        content_id=LOGO_CONTENT_ID,
                    )
                )

            context = build_signup_context(
                details,
                dashboard_url=f"{self.env_config.root_url}{self.app_config.event.dashboard_path}",
                site_name=self.app_config.event.site_name,
                now=self.clock(),
                has_logo=bool(attachments),
            )
            request = NotificationRequest(
                type=kind,
                recipient_email=details.email,
                context=context,
                stable_id=short_digest(details.email),
                attachments=attachments,
            )
            return self.deliver(request)
        except Exception as e:
            self.logger.error(
                f"Unexpected error sending signup welcome email: {e}",
                exc_info=True,
                extra={"event": "notification.compose.failure", "notification_type": kind.value},
            )
            return NotificationResult(
                kind, ResultCode.DELIVERY_FAILED, error_kind="unexpected_error", error=str(e)
            )

    # ------------------------------------------------------------------
    # Shared pipeline
    # ------------------------------------------------------------------

    def deliver(self, request: NotificationRequest) -> NotificationResult:
        """Compose and dispatch a request, applying its type's failure policy."""
        policy = self.policies[request.type]

        with log_context(
            notification_type=request.type.value,
            recipient=mask_email(request.recipient_email),
        ):
            try:
                message = self.compose(request, policy)
            except NotificationError as e:
                self.logger.error(
                    f"Failed to compose {request.type.value} notification: {e}",
                    exc_info=True,
                    extra={"event": "notification.compose.failure", "error_type": e.kind},
                )
                return NotificationResult(
                    request.type, ResultCode.DELIVERY_FAILED, error_kind=e.kind, error=str(e)
                )

            message_id = message["Message-ID"]
            with log_context(notification_id=message_id):
                outcome = self.dispatcher.dispatch(message, policy)

            if outcome.delivered or outcome.suppressed:
                return NotificationResult(request.type, ResultCode.SUCCESS, message_id=message_id)

            return NotificationResult(
                request.type,
                ResultCode.DELIVERY_FAILED,
                message_id=message_id,
                error_kind=outcome.error_kind,
                error=outcome.error,
            )

    def compose(self, request: NotificationRequest, policy: NotificationPolicy) -> EmailMessage:
        """Render and assemble the message for a request.

        Raises:
            NotificationError: Template, recipient or attachment problems
        """
        context = {**self._brand_context(), **request.context}
        raw = self.template_store.resolve(request.template_name or policy.template_id)
        body = self.engine.render(raw, context, defaults=_DEFAULTS_BY_TYPE.get(request.type))
        subject = self.engine.render(policy.subject, context, autoescape=False)

        sender_name = self.env_config.smtp_sender_name or self.engine.render(
            policy.sender_name or self.app_config.event.site_name, context, autoescape=False
        )
        token = self.assembler.make_token(policy.token_prefix, request.stable_id)

        return self.assembler.assemble(
            body=body,
            recipient=request.recipient_email,
            subject=subject,
            sender=format_sender(sender_name, self.env_config.smtp_user),
            idempotency_key=token,
            attachments=request.attachments,
        )

    def _brand_context(self) -> Dict[str, str]:
        return {
            "eventName": self.app_config.event.name,
            "siteName": self.app_config.event.site_name,
        }
