"""SMTP transport for notification delivery.

A thin wrapper around smtplib with TLS/SSL support and connection cleanup.
Transport settings are checked once, when the client is built: a client with
missing credentials is never created, so no message can fail for that reason.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional

from event_mailer.config.environment import EnvironmentConfig
from event_mailer.config.exceptions import ConfigurationError

from .models import SMTPDeliveryError

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Sends fully composed messages over SMTP.

    Opens one connection per message. There is no retry and no timeout of
    its own; callers that need a deadline pass a factory that sets one.
    """

    def __init__(
        self,
        env_config: EnvironmentConfig,
        use_tls: bool = True,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize the client.

        Args:
            env_config: Environment configuration with SMTP settings
            use_tls: Upgrade plain connections with STARTTLS
            smtp_factory: Factory for SMTP instances (for mocking)
            smtp_ssl_factory: Factory for SMTP_SSL instances (for mocking)

        Raises:
            ConfigurationError: If host, user or password is missing
        """
        missing = [
            name
            for name, value in (
                ("SMTP_HOST", env_config.smtp_host),
                ("SMTP_USER", env_config.smtp_user),
                ("SMTP_PASS", env_config.smtp_pass),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Email configuration missing",
                errors=[f"Missing {name}" for name in missing],
                suggestions=["Set the SMTP_* variables in the environment or .env file"],
            )

        self.env_config = env_config
        self.use_tls = use_tls
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    @property
    def sender_address(self) -> str:
        return self.env_config.smtp_user

    def send(self, message: EmailMessage) -> None:
        """Deliver one message.

        Raises:
            SMTPDeliveryError: If connecting, authenticating or sending fails
        """
        host = self.env_config.smtp_host
        port = self.env_config.smtp_port
        smtp = None
        try:
            if port == IMPLICIT_TLS_PORT:
                logger.debug(f"Connecting to {host}:{port} with implicit TLS")
                smtp = self.smtp_ssl_factory(host, port, context=ssl.create_default_context())
            else:
                logger.debug(f"Connecting to {host}:{port}")
                smtp = self.smtp_factory(host, port)
                if self.use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    smtp.starttls(context=ssl.create_default_context())

            smtp.login(self.env_config.smtp_user, self.env_config.smtp_pass)
            smtp.send_message(message)
            logger.debug(f"Message {message['Message-ID']} accepted by {host}")

        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise SMTPDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")
