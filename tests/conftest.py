"""Shared fixtures for event mailer tests."""

import pytest
from cryptography.fernet import Fernet

from event_mailer.config.environment import EnvironmentConfig
from event_mailer.config.models import AppConfig
from event_mailer.logging.context import clear_log_context
from event_mailer.records import InMemoryRecordStore, UserRecord

LINK_KEY = Fernet.generate_key().decode("utf-8")


@pytest.fixture(autouse=True)
def clean_log_context():
    """Every test starts without leftover logging context."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def link_key():
    return LINK_KEY


@pytest.fixture
def app_config():
    """Application configuration with packaged defaults."""
    return AppConfig.model_validate(
        {
            "event": {
                "name": "Agneepath 7.0",
                "site_name": "Agneepath",
                "message_id_domain": "agneepath.co.in",
            }
        }
    )


@pytest.fixture
def env_config():
    """Environment configuration without optional attachments."""
    return EnvironmentConfig(
        smtp_host="smtp.test.com",
        smtp_port=587,
        smtp_user="events@test.com",
        smtp_pass="testpass",
        root_url="https://agneepath.co.in/",
        verification_link_key=LINK_KEY,
    )


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set a complete, valid environment."""
    values = {
        "SMTP_HOST": "smtp.test.com",
        "SMTP_PORT": "587",
        "SMTP_USER": "events@test.com",
        "SMTP_PASS": "testpass",
        "ROOT_URL": "https://agneepath.co.in",
        "VERIFICATION_LINK_KEY": LINK_KEY,
    }
    for name in ("SMTP_SENDER_NAME", "LOGO_PATH", "BANK_DETAILS_PDF", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values


@pytest.fixture
def record_store():
    """Users in each state the verification flow distinguishes."""
    return InMemoryRecordStore(
        [
            UserRecord(email="pending@example.com", email_verified=False, verification_id="vid-123"),
            UserRecord(email="verified@example.com", email_verified=True, verification_id="vid-456"),
            UserRecord(email="noid@example.com", email_verified=False, verification_id=None),
        ]
    )
