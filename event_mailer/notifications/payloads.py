"""Template context builders.

Each builder turns the data that triggered a notification into the flat
context mapping its template expects: scalar values, condition flags and
generated fragments.
"""

from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable

from event_mailer.domain.models import PaymentForm, RegistrationForm, SignupDetails

from .formatting import Money, ValueFormatter
from .generators import (
    accommodation_rows,
    attachment_list,
    coach_rows,
    player_rows,
    sports_cost_rows,
)
from .models import Attachment

UNIVERSITY_NOT_PROVIDED = "Not provided yet"

SIGNUP_METHOD_LABELS = {
    "google": "Google OAuth",
    "form": "Email & Password",
}

#: Defaults for scalars that are missing or blank in a signup context
SIGNUP_DEFAULTS = {
    "name": "there",
    "universityName": UNIVERSITY_NOT_PROVIDED,
}


def build_verification_context(verification_link: str, event_name: str, now: datetime) -> Dict:
    """Context for verify-email.html."""
    return {
        "verificationLink": verification_link,
        "eventName": event_name,
        "currentYear": str(now.year),
    }


def build_signup_context(
    details: SignupDetails,
    dashboard_url: str,
    site_name: str,
    now: datetime,
    has_logo: bool = False,
) -> Dict:
    """Context for signup.html.

    ``isFormSignup`` selects the "please verify your email" branch; OAuth
    signups are already verified.
    """
    return {
        "name": details.name,
        "email": details.email,
        "universityName": details.university_name or "",
        "signupMethod": SIGNUP_METHOD_LABELS[details.signup_method],
        "isFormSignup": details.signup_method == "form",
        "dashboardUrl": dashboard_url,
        "timestamp": now,
        "currentYear": str(now.year),
        "siteName": site_name,
        "hasLogo": has_logo,
    }


def build_registration_context(
    form: RegistrationForm,
    event_name: str,
    sport_name: Callable[[str], str],
    formatter: ValueFormatter,
) -> Dict:
    """Context for registration.html.

    Coach rows come before player rows in a single fragment. All submitted
    fields are shown, including any internal ones the caller left in.
    """
    details = coach_rows(form.entries.coach_fields, formatter) + player_rows(
        form.entries.player_fields, formatter
    )
    return {
        "name": form.name,
        "sport": sport_name(form.title),
        "universityName": form.university_name,
        "eventName": event_name,
        "playerAndCoachDetails": details,
    }


def _local_date(value, formatter: ValueFormatter) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(formatter.tz).date()
    return value


def build_payment_context(
    form: PaymentForm,
    event_name: str,
    site_name: str,
    per_player_fee: int,
    sport_name: Callable[[str], str],
    formatter: ValueFormatter,
    attachments: Iterable[Attachment] = (),
) -> Dict[str, Any]:
    """Context for payment-unconfirmed.html and payment-confirmation.html."""
    return {
        "name": form.name,
        "payeeName": form.payee_name,
        "paymentTypes": list(form.payment_types),
        "paymentMode": form.payment_mode,
        "amountInNumbers": Money(form.amount_in_numbers),
        "amountInWords": form.amount_in_words.upper(),
        "transactionId": form.transaction_id,
        "paymentDate": _local_date(form.payment_date, formatter),
        "remarks": form.remarks or "",
        "sportsTable": sports_cost_rows(
            form.sports_players, per_player_fee, sport_name, formatter
        ),
        "accommodationTable": accommodation_rows(
            form.accommodation_people, form.accommodation_price, formatter
        ),
        "attachmentList": attachment_list(attachments),
        "eventName": event_name,
        "siteName": site_name,
    }
