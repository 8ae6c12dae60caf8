"""User record lookup used by the verification flow.

The platform's user database is an external collaborator; the mailer only
needs to look a user up by email. RecordStore is that contract.
InMemoryRecordStore backs the CLI and tests and can be seeded from a JSON or
YAML file.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from event_mailer.config.exceptions import ConfigurationError


class UserRecord(BaseModel):
    """The parts of a user document the notification flows read."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    email_verified: bool = False
    verification_id: Optional[str] = Field(None, alias="VerificationId")
    display_name: Optional[str] = Field(None, alias="name")


class RecordStore(Protocol):
    """Lookup of user records by email address."""

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        ...


class InMemoryRecordStore:
    """Dictionary-backed RecordStore keyed by lower-cased email."""

    def __init__(self, records: Iterable[UserRecord] = ()):
        self._records: Dict[str, UserRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: UserRecord) -> None:
        self._records[record.email.strip().lower()] = record

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        return self._records.get(email.strip().lower())

    def __len__(self) -> int:
        return len(self._records)

    @classmethod
    def from_file(cls, path: Path) -> "InMemoryRecordStore":
        """Load a list of user documents from a .json, .yaml or .yml file.

        Raises:
            ConfigurationError: If the file cannot be read or validated
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
            if Path(path).suffix.lower() == ".json":
                raw = json.loads(text)
            else:
                raw = yaml.safe_load(text)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read user records from {path}: {e}") from e

        if not isinstance(raw, list):
            raise ConfigurationError(
                f"User records file {path} must contain a list of user documents"
            )

        try:
            return cls(UserRecord.model_validate(item) for item in raw)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid user record in {path}",
                errors=[str(err["msg"]) for err in e.errors()],
            ) from e
