"""Tests for logging context propagation and address masking."""

import threading

import pytest

from event_mailer.logging.context import (
    get_log_context,
    log_context,
    mask_email,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    """Context starts empty."""
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(notification_type="verification")
    assert get_log_context() == {"notification_type": "verification"}
    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Nested pushes merge; pops restore the outer layer."""
    outer = push_log_context(notification_type="payment")
    inner = push_log_context(notification_id="<payment-TX1-1@agneepath.co.in>")

    assert get_log_context() == {
        "notification_type": "payment",
        "notification_id": "<payment-TX1-1@agneepath.co.in>",
    }

    pop_log_context(inner)
    assert get_log_context() == {"notification_type": "payment"}
    pop_log_context(outer)
    assert get_log_context() == {}


def test_context_override():
    """Pushing an existing key shadows it until popped."""
    outer = push_log_context(recipient="a**@example.com")
    inner = push_log_context(recipient="b**@example.com")
    assert get_log_context()["recipient"] == "b**@example.com"
    pop_log_context(inner)
    assert get_log_context()["recipient"] == "a**@example.com"
    pop_log_context(outer)


def test_get_log_context_returns_copy():
    """Mutating the returned dict does not leak into the active context."""
    with log_context(notification_type="signup"):
        snapshot = get_log_context()
        snapshot["notification_type"] = "tampered"
        assert get_log_context() == {"notification_type": "signup"}


def test_context_manager_restores_on_exception():
    with pytest.raises(RuntimeError):
        with log_context(notification_type="registration"):
            raise RuntimeError("boom")

    assert get_log_context() == {}


def test_context_isolated_between_threads():
    """A dispatch on another thread never sees this thread's fields."""
    seen = {}

    def worker():
        seen["context"] = get_log_context()

    with log_context(notification_type="verification"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["context"] == {}


@pytest.mark.parametrize(
    "address, expected",
    [
        ("ada@example.com", "a**@example.com"),
        ("x@example.com", "*@example.com"),
        ("not-an-address", "**************"),
        ("", ""),
        (None, ""),
    ],
)
def test_mask_email(address, expected):
    assert mask_email(address) == expected
