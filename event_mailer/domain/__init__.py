"""Domain models for the event mailer."""

from .models import (
    PaymentForm,
    PaymentProof,
    RegistrationFields,
    RegistrationForm,
    SignupDetails,
    SportPlayers,
)

__all__ = [
    "PaymentForm",
    "PaymentProof",
    "RegistrationFields",
    "RegistrationForm",
    "SignupDetails",
    "SportPlayers",
]
