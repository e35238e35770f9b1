"""Models for analyzed food scans."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNKNOWN_DURATION = "N/A"
UNKNOWN_BURN_COMMENT = "Can't calculate the damage if I can't see the crime."


class RiskLevel(str, Enum):
    """Health risk bucket assigned by the model."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BurnOff(BaseModel):
    """Exercise needed to burn off the scanned calories."""

    model_config = ConfigDict(extra="ignore")

    treadmill: str = Field(min_length=1)
    cycling: str = Field(min_length=1)
    walking: str = Field(min_length=1)
    running: str = Field(min_length=1)
    burn_comment: str = Field(alias="burnComment", min_length=1)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def unknown(cls, burn_comment: str | None = None) -> "BurnOff":
        """Return the sentinel breakdown used for unidentified food."""
        return cls.model_validate(
            {
                "treadmill": UNKNOWN_DURATION,
                "cycling": UNKNOWN_DURATION,
                "walking": UNKNOWN_DURATION,
                "running": UNKNOWN_DURATION,
                "burnComment": burn_comment or UNKNOWN_BURN_COMMENT,
            }
        )


class ScanResult(BaseModel):
    """Validated nutrition estimate for a single food item."""

    model_config = ConfigDict(extra="ignore")

    food_name: str = Field(alias="foodName", min_length=1)
    calories: int = Field(ge=0)
    ingredients: list[str]
    risk_level: RiskLevel = Field(alias="riskLevel")
    risk_reason: str = Field(alias="riskReason", min_length=1)
    humor_comment: str = Field(alias="humorComment", min_length=1)
    brand_note: str | None = Field(default=None, alias="brandNote")
    burn_off: BurnOff | None = Field(default=None, alias="burnOff")

    @field_validator("calories", mode="before")
    @classmethod
    def _coerce_calories(cls, value: object) -> object:
        if isinstance(value, bool) or value is None:
            raise ValueError("calories must be numeric")
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError as exc:
                raise ValueError("calories must be numeric") from exc
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError("calories must be finite")
            if value < 0:
                raise ValueError("calories must not be negative")
            return round(value)
        return value

    @model_validator(mode="after")
    def _unidentified_has_no_exercise(self) -> "ScanResult":
        if self.calories == 0:
            comment = self.burn_off.burn_comment if self.burn_off else None
            self.burn_off = BurnOff.unknown(comment)
        return self

    @property
    def is_identified(self) -> bool:
        """Return True when the model recognized the food."""
        return self.calories > 0

    def to_json(self) -> dict[str, object]:
        """Serialize with the camelCase field names used on the wire."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class ImagePayload:
    """Base64 image split out of a data URI."""

    mime_type: str
    base64_data: str

    def to_data_url(self) -> str:
        """Rebuild the data URL for model input."""
        return f"data:{self.mime_type};base64,{self.base64_data}"


@dataclass(frozen=True)
class ScanRecord:
    """A confirmed scan stored for a user."""

    id: UUID
    user_id: str
    context: str
    result: ScanResult
    created_at: datetime

    def to_json(self) -> dict[str, object]:
        """Serialize the record for API responses."""
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "context": self.context,
            "createdAt": self.created_at.isoformat(),
            **self.result.to_json(),
        }
