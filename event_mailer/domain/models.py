"""Domain models for the data that triggers notifications.

These mirror the payloads the platform already holds when it asks for a
notification: a submitted registration form, a submitted payment form and a
completed signup. Field aliases follow the platform's camelCase JSON.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegistrationFields(BaseModel):
    """Free-form coach and player entries of a registration form."""

    model_config = _CAMEL

    coach_fields: Dict[str, Any] = Field(default_factory=dict)
    player_fields: List[Dict[str, Any]] = Field(default_factory=list)


class RegistrationForm(BaseModel):
    """A submitted sport registration for one university team."""

    model_config = _CAMEL

    id: str = Field(..., alias="_id", min_length=1, description="Form identifier")
    email: str = Field(..., description="Address the confirmation is sent to")
    name: str = Field(..., description="Name of the person who registered")
    title: str = Field(..., description="Sport key of the registration")
    university_name: str = Field("", description="Registering university")
    owner_id: Optional[str] = None
    status: Optional[str] = None
    entries: RegistrationFields = Field(default_factory=RegistrationFields, alias="fields")


class SportPlayers(BaseModel):
    """Number of players paid for in one sport."""

    sport: str = Field(..., min_length=1)
    players: int = Field(..., ge=1)


class PaymentProof(BaseModel):
    """Uploaded proof of payment (screenshot or receipt)."""

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        """File extension including the dot, or empty string."""
        dot = self.filename.rfind(".")
        return self.filename[dot:] if dot > 0 else ""


class PaymentForm(BaseModel):
    """A submitted payment, before or after admin confirmation."""

    model_config = _CAMEL

    email: str
    name: str = ""
    payment_types: List[str] = Field(..., min_length=1, max_length=2)
    payment_mode: str
    sports_players: List[SportPlayers] = Field(default_factory=list)
    amount_in_numbers: Decimal
    amount_in_words: str
    payee_name: str
    transaction_id: str = Field(..., min_length=1)
    accommodation_people: Optional[int] = Field(None, ge=0)
    accommodation_price: Optional[int] = Field(None, ge=0)
    payment_date: Union[datetime, date]
    payment_proof: Optional[PaymentProof] = None
    remarks: Optional[str] = None

    @field_validator("transaction_id")
    @classmethod
    def strip_transaction_id(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("transaction_id cannot be blank")
        return stripped


class SignupDetails(BaseModel):
    """A freshly created account."""

    model_config = _CAMEL

    name: str
    email: str
    university_name: Optional[str] = None
    signup_method: Literal["google", "form"]
