"""Environment variable loading and validation for the mail transport."""

import os
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet
from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

DEFAULT_SMTP_PORT = 587


class EnvironmentConfig:
    """Secrets and deployment-specific settings read from the environment."""

    def __init__(
        self,
        smtp_host: str,
        smtp_user: str,
        smtp_pass: str,
        root_url: str,
        verification_link_key: str,
        smtp_port: int = DEFAULT_SMTP_PORT,
        smtp_sender_name: Optional[str] = None,
        logo_path: Optional[Path] = None,
        bank_details_pdf: Optional[Path] = None,
        log_level: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.root_url = root_url if root_url.endswith("/") else f"{root_url}/"
        self.verification_link_key = verification_link_key
        self.smtp_sender_name = smtp_sender_name
        self.logo_path = Path(logo_path) if logo_path else None
        self.bank_details_pdf = Path(bank_details_pdf) if bank_details_pdf else None
        self.log_level = log_level


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SMTP_HOST: SMTP server hostname
    - SMTP_USER: SMTP username, also used as the sender address
    - SMTP_PASS: SMTP password
    - ROOT_URL: Public base URL of the platform (verification and dashboard links)
    - VERIFICATION_LINK_KEY: Fernet key used to encrypt verification link tokens

    Optional environment variables:
    - SMTP_PORT: SMTP server port (default: 587)
    - SMTP_SENDER_NAME: Override for the sender display name
    - LOGO_PATH: Image embedded inline in the signup welcome email
    - BANK_DETAILS_PDF: PDF attached to registration confirmations
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST")
    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")
    root_url = os.getenv("ROOT_URL")
    link_key = os.getenv("VERIFICATION_LINK_KEY")

    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_sender_name = os.getenv("SMTP_SENDER_NAME")
    logo_path = os.getenv("LOGO_PATH")
    bank_details_pdf = os.getenv("BANK_DETAILS_PDF")
    log_level = os.getenv("LOG_LEVEL")

    for name, value in (
        ("SMTP_HOST", smtp_host),
        ("SMTP_USER", smtp_user),
        ("SMTP_PASS", smtp_pass),
        ("ROOT_URL", root_url),
        ("VERIFICATION_LINK_KEY", link_key),
    ):
        if not value:
            errors.append(f"Missing required environment variable: {name}")

    smtp_port = DEFAULT_SMTP_PORT
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    if smtp_user:
        try:
            validate_email(smtp_user, check_deliverability=False)
        except EmailNotValidError as e:
            errors.append(f"SMTP_USER must be an email address: '{smtp_user}' ({e})")

    if root_url and not root_url.startswith(("http://", "https://")):
        errors.append(f"Invalid ROOT_URL: '{root_url}'. Must start with http:// or https://")

    if link_key:
        try:
            Fernet(link_key.encode("utf-8"))
        except (ValueError, TypeError):
            errors.append(
                "Invalid VERIFICATION_LINK_KEY: must be a 32-byte url-safe base64 Fernet key"
            )

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Generate a link key with: python -c 'from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())'",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        root_url=root_url,
        verification_link_key=link_key,
        smtp_sender_name=smtp_sender_name,
        logo_path=logo_path,
        bank_details_pdf=bank_details_pdf,
        log_level=log_level,
    )
