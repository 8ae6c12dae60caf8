"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

DEFAULT_SPORTS: Dict[str, str] = {
    "Athletics": "Athletics",
    "Badminton_Men": "Badminton (Men)",
    "Badminton_Women": "Badminton (Women)",
    "Basketball_Men": "Basketball (Men)",
    "Basketball_Women": "Basketball (Women)",
    "Chess_Mixed": "Chess (Mixed)",
    "Cricket_Men": "Cricket (Men)",
    "Football_Men": "Football (Men)",
    "Football_Women": "Football (Women)",
    "Squash_Men": "Squash (Men)",
    "Squash_Women": "Squash (Women)",
    "Swimming_Mixed": "Swimming (Mixed)",
    "Table_Tennis_Men": "Table Tennis (Men)",
    "Table_Tennis_Women": "Table Tennis (Women)",
    "Tennis_Mixed": "Tennis (Mixed)",
    "Volleyball_Men": "Volleyball (Men)",
    "Volleyball_Women": "Volleyball (Women)",
}


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class DigitGrouping(str, Enum):
    """Thousands-separator conventions for amounts."""

    INDIAN = "indian"  # 1,00,000
    WESTERN = "western"  # 100,000


class EventConfig(BaseModel):
    """Identity of the event the notifications are sent for."""

    name: str = Field(..., min_length=1, description="Event name shown in subjects (e.g. 'Agneepath 7.0')")
    site_name: str = Field("Agneepath", min_length=1, description="Brand used as sender display name")
    message_id_domain: str = Field(
        "agneepath.co.in", min_length=1, description="Domain part of generated Message-ID headers"
    )
    dashboard_path: str = Field("dashboard", description="Dashboard path relative to ROOT_URL")
    timezone: str = Field("Asia/Kolkata", description="IANA timezone used for rendered dates")

    @field_validator("name", "site_name", "message_id_domain")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("dashboard_path")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        """Dashboard path is joined onto ROOT_URL, which already ends with '/'."""
        return v.strip().lstrip("/")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names unknown to the tz database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class FeeConfig(BaseModel):
    """Registration fee settings used in payment breakdowns."""

    currency_symbol: str = Field("₹", min_length=1, description="Prefix for rendered amounts")
    per_player_fee: int = Field(800, ge=0, description="Registration fee per player")
    digit_grouping: DigitGrouping = Field(DigitGrouping.INDIAN, description="Digit grouping style")

    model_config = {"use_enum_values": True}


class EmailConfig(BaseModel):
    """Email delivery settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    templates_dir: Optional[Path] = Field(
        None, description="Directory overriding the packaged email templates"
    )
    bank_details_filename: str = Field(
        "BankDetails.pdf", min_length=1, description="Attachment name for the bank details PDF"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the event mailer."""

    event: EventConfig = Field(..., description="Event identity")
    fees: FeeConfig = Field(default_factory=FeeConfig, description="Fee settings")
    sports: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_SPORTS),
        description="Sport key to display name",
    )
    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    def sport_name(self, key: str) -> str:
        """Display name for a sport key, falling back to the key itself."""
        return self.sports.get(key, key)
