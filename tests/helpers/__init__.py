"""Test helper utilities for event mailer tests."""

from .factories import (
    FIXED_NOW,
    RecordingSMTP,
    make_payment_form,
    make_registration_form,
    make_signup_details,
)

__all__ = [
    "FIXED_NOW",
    "RecordingSMTP",
    "make_payment_form",
    "make_registration_form",
    "make_signup_details",
]
