"""Tests for the delivery dispatcher and per-type failure policy."""

import logging
from email.message import EmailMessage
from unittest.mock import Mock

import pytest

from event_mailer.notifications.dispatcher import DeliveryDispatcher
from event_mailer.notifications.models import NotificationType, SMTPDeliveryError
from event_mailer.notifications.policies import DEFAULT_POLICIES

TRANSACTIONAL = DEFAULT_POLICIES[NotificationType.REGISTRATION]
BEST_EFFORT = DEFAULT_POLICIES[NotificationType.SIGNUP]


def find_event(caplog, event):
    return next(r for r in caplog.records if getattr(r, "event", None) == event)


@pytest.fixture
def message():
    message = EmailMessage()
    message["To"] = "ada@example.com"
    message["Message-ID"] = "<registration-form-1-1@agneepath.co.in>"
    message.set_content("<p>Hi</p>", subtype="html")
    return message


def test_policies_flag_only_signup_as_best_effort():
    assert [t for t, p in DEFAULT_POLICIES.items() if not p.propagate_failure] == [
        NotificationType.SIGNUP
    ]


def test_successful_dispatch(message, caplog):
    transport = Mock()

    with caplog.at_level(logging.INFO):
        outcome = DeliveryDispatcher(transport).dispatch(message, TRANSACTIONAL)

    transport.send.assert_called_once_with(message)
    assert outcome.delivered is True
    assert outcome.suppressed is False
    record = find_event(caplog, "notification.send.success")
    assert record.recipient == "a**@example.com"
    assert "ada@example.com" not in caplog.text


def test_transactional_failure_is_surfaced(message, caplog):
    transport = Mock()
    transport.send.side_effect = SMTPDeliveryError("SMTP error during message delivery: 550")

    with caplog.at_level(logging.INFO):
        outcome = DeliveryDispatcher(transport).dispatch(message, TRANSACTIONAL)

    assert outcome.delivered is False
    assert outcome.suppressed is False
    assert outcome.error_kind == "delivery_failed"
    assert "550" in outcome.error
    record = find_event(caplog, "notification.send.failure")
    assert record.levelno == logging.ERROR
    assert record.exc_info is not None


def test_best_effort_failure_is_suppressed(message, caplog):
    transport = Mock()
    transport.send.side_effect = SMTPDeliveryError("Network error during SMTP connection")

    with caplog.at_level(logging.INFO):
        outcome = DeliveryDispatcher(transport).dispatch(message, BEST_EFFORT)

    assert outcome.delivered is False
    assert outcome.suppressed is True
    record = find_event(caplog, "notification.send.suppressed")
    assert record.levelno == logging.WARNING


def test_single_attempt_only(message):
    """No retry: a failed send is attempted exactly once."""
    transport = Mock()
    transport.send.side_effect = SMTPDeliveryError("boom")

    DeliveryDispatcher(transport).dispatch(message, TRANSACTIONAL)

    assert transport.send.call_count == 1


def test_unexpected_transport_errors_propagate(message):
    """Only SMTPDeliveryError is mapped to an outcome."""
    transport = Mock()
    transport.send.side_effect = RuntimeError("bug")

    with pytest.raises(RuntimeError):
        DeliveryDispatcher(transport).dispatch(message, TRANSACTIONAL)
