"""Advisory checks on raw configuration that do not block startup."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    email = config_dict.get("email", {})
    if isinstance(email, dict) and email.get("use_tls") is False:
        warning_messages.append(
            "email.use_tls is false; STARTTLS is disabled and SMTP credentials will be "
            "sent unencrypted unless SMTP_PORT is 465 (implicit TLS)"
        )

    fees = config_dict.get("fees", {})
    if isinstance(fees, dict):
        fee = fees.get("per_player_fee")
        if isinstance(fee, int) and fee == 0:
            warning_messages.append(
                "fees.per_player_fee is 0; payment breakdowns will show zero amounts"
            )

    sports = config_dict.get("sports")
    if isinstance(sports, dict) and not sports:
        warning_messages.append(
            "sports mapping is empty; sport keys will be shown instead of names"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
