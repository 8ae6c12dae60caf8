"""Command-line entry point for the event mailer."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from event_mailer.config.exceptions import ConfigurationError
from event_mailer.config.loader import load_app_config, load_config
from event_mailer.config.models import AppConfig
from event_mailer.domain.models import PaymentForm, RegistrationForm, SignupDetails
from event_mailer.logging import get_logger
from event_mailer.logging.config import configure_logging
from event_mailer.notifications.formatting import ValueFormatter
from event_mailer.notifications.models import NotificationError, NotificationResult
from event_mailer.notifications.placeholders import PlaceholderEngine
from event_mailer.notifications.service import NotificationService
from event_mailer.notifications.template_store import TemplateId, TemplateStore
from event_mailer.records import InMemoryRecordStore

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def read_data_file(path: Path) -> Any:
    """Read a JSON (.json) or YAML (anything else) document."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def render_preview(
    app_config: AppConfig, template_id: TemplateId, context: Dict[str, Any]
) -> str:
    """Render a template with the configured formatting, without sending."""
    formatter = ValueFormatter(
        timezone_name=app_config.event.timezone,
        currency_symbol=app_config.fees.currency_symbol,
        grouping=app_config.fees.digit_grouping,
    )
    store = TemplateStore(app_config.email.templates_dir)
    brand = {"eventName": app_config.event.name, "siteName": app_config.event.site_name}
    return PlaceholderEngine(formatter).render(store.resolve(template_id), {**brand, **context})


def run_send(
    service: NotificationService, kind: str, payload: Dict[str, Any], confirmed: bool = False
) -> NotificationResult:
    """Dispatch one notification of the given kind from a decoded payload."""
    if kind == "verification":
        return service.send_verification(payload["email"])
    if kind == "registration":
        return service.send_registration_confirmation(RegistrationForm.model_validate(payload))
    if kind == "payment":
        payload = dict(payload)
        proof_path = payload.pop("paymentProofPath", None)
        if proof_path:
            proof = Path(proof_path)
            payload["paymentProof"] = {"filename": proof.name, "content": proof.read_bytes()}
        return service.send_payment_confirmation(PaymentForm.model_validate(payload), confirmed)
    if kind == "signup":
        return service.send_signup_welcome(SignupDetails.model_validate(payload))
    raise ValueError(f"Unknown notification kind: {kind}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Event mailer - compose and send transactional notification emails"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    preview = commands.add_parser("preview", help="Render a template to stdout")
    preview.add_argument("template", choices=[t.value for t in TemplateId])
    preview.add_argument("--context", type=Path, help="JSON or YAML file with template values")

    send = commands.add_parser("send", help="Compose and send one notification")
    send.add_argument("kind", choices=["verification", "registration", "payment", "signup"])
    send.add_argument("--payload", type=Path, required=True, help="JSON or YAML payload file")
    send.add_argument("--records", type=Path, help="User records file (verification only)")
    send.add_argument(
        "--confirmed", action="store_true", help="Payment was confirmed by an administrator"
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point.

    Returns:
        0 on success or already-satisfied, 1 on notification failure,
        2 on configuration errors.
    """
    args = build_parser().parse_args(argv)

    try:
        if args.command == "preview":
            app_config = load_app_config(args.config)
            context = (read_data_file(args.context) if args.context else None) or {}
            if not isinstance(context, dict):
                raise ValueError("context file must contain a mapping of template values")
            print(render_preview(app_config, TemplateId(args.template), context))
            return EXIT_OK

        app_config, env_config = load_config(args.config)
        level = args.log_level or env_config.log_level or app_config.logging.level
        configure_logging(
            level=level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        record_store = InMemoryRecordStore.from_file(args.records) if args.records else None
        service = NotificationService(app_config, env_config, record_store=record_store)
        payload = read_data_file(args.payload)
        result = run_send(service, args.kind, payload, confirmed=args.confirmed)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except (
        OSError, ValueError, KeyError, ValidationError, yaml.YAMLError, NotificationError
    ) as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return EXIT_FAILED

    logger.info(
        f"Notification finished with {result.code.value}",
        extra={
            "event": "cli.send.completed",
            "result_code": result.code.value,
            "message_id": result.message_id,
        },
    )
    print(result.code.value)
    if result.error:
        print(result.error, file=sys.stderr)
    return EXIT_OK if result.is_success() else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
