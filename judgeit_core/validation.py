"""
Input validation schemas using Pydantic v2
Validates raw store records and judge time-log writes
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Self, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .types import Heat, Player, Team, TimeLog, TimeType

logger = logging.getLogger(__name__)

_STRICT_CLOCK_RE = re.compile(r"^(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,3}))?$", re.ASCII)

R = TypeVar("R")

# ==================== VALIDATOR FUNCTIONS ====================


def _coerce_id(v: Any) -> Any:
    # Legacy rows carry integer ids; the store's native ids are strings.
    if isinstance(v, bool):
        raise ValueError("id must be a string")
    if isinstance(v, int):
        return str(v)
    return v


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class _StoreRecord(BaseModel):
    id: str = Field(..., min_length=1, validation_alias=AliasChoices("_id", "id"))

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> Any:
        return _coerce_id(v)


class PlayerRecord(_StoreRecord):
    name: str = Field(..., min_length=1, max_length=255)
    image_url: Optional[str] = None
    fun_fact: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = InputSanitizer.sanitize_string(v)
        if len(v) == 0:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("image_url", "fun_fact", mode="before")
    @classmethod
    def validate_optional_text(cls, v: Any) -> Any:
        return _blank_to_none(v)


class TeamRecord(_StoreRecord):
    name: str = Field(..., min_length=1, max_length=255)
    player_1_id: Optional[str] = None
    player_2_id: Optional[str] = None
    player_3_id: Optional[str] = None
    player_4_id: Optional[str] = None
    image_url: Optional[str] = None
    is_out: bool = False

    @field_validator("player_1_id", "player_2_id", "player_3_id", "player_4_id", mode="before")
    @classmethod
    def validate_player_slot(cls, v: Any) -> Any:
        return _blank_to_none(_coerce_id(v))

    @field_validator("image_url", mode="before")
    @classmethod
    def validate_image_url(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("is_out", mode="before")
    @classmethod
    def validate_is_out(cls, v: Any) -> Any:
        return False if v is None else v


def _validate_heat_date(v: str) -> str:
    try:
        date.fromisoformat(v[:10])
    except ValueError:
        raise ValueError(f"date must start with YYYY-MM-DD, got {v!r}")
    return v


class HeatRecord(_StoreRecord):
    name: Optional[str] = None
    heat: int = Field(..., ge=0, le=9999, description="Heat number")
    date: str = Field(..., min_length=10, description="ISO date, optionally with time")
    is_current: bool = False

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _validate_heat_date(v)


class HeatInput(BaseModel):
    """New heat, validated before it is written to the store."""

    heat: int = Field(..., ge=0, le=9999, description="Heat number")
    date: str = Field(..., min_length=10, description="ISO date, optionally with time")
    is_current: bool = False
    name: Optional[str] = Field(None, max_length=255)

    model_config = ConfigDict(extra="forbid")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _validate_heat_date(v.strip())

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return InputSanitizer.sanitize_string(v) if v is not None else None


class TimeTypeRecord(_StoreRecord):
    name: str = Field(..., min_length=1, max_length=100)
    time_eng: str = Field(..., min_length=1, max_length=50, description="Dispatch key")


class TimeLogRecord(_StoreRecord):
    """Stored time log. ``time`` is read as-is: bad clock strings surface later as NaN."""

    player_id: str = Field(..., min_length=1)
    heat_id: str = Field(..., min_length=1)
    time_type_id: str = Field(..., min_length=1)
    team_id: Optional[str] = None
    time_seconds: float = 0.0
    time: Optional[str] = None
    creation_time: Optional[float] = Field(
        None, validation_alias=AliasChoices("_creationTime", "creation_time", "created_at")
    )

    @field_validator("player_id", "heat_id", "time_type_id", mode="before")
    @classmethod
    def validate_refs(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("team_id", mode="before")
    @classmethod
    def validate_team_id(cls, v: Any) -> Any:
        return _blank_to_none(_coerce_id(v))

    @field_validator("time_seconds", mode="before")
    @classmethod
    def validate_time_seconds(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("creation_time", mode="before")
    @classmethod
    def validate_creation_time(cls, v: Any) -> Any:
        # Supabase rows carry ISO "created_at"; the reactive store uses epoch ms.
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v.replace("Z", "+00:00")).timestamp() * 1000
            except ValueError:
                return None
        return v


class TimeLogInput(BaseModel):
    """Judge action payload, validated before it is written to the store."""

    player_id: str = Field(..., min_length=1, max_length=64)
    heat_id: str = Field(..., min_length=1, max_length=64)
    time_type_id: str = Field(..., min_length=1, max_length=64)
    team_id: Optional[str] = Field(None, max_length=64)
    time: str = Field(..., description="Clock time HH:MM:SS[.mmm]")
    time_seconds: float = Field(..., ge=0, lt=86400, description="Seconds since midnight")

    model_config = ConfigDict(extra="forbid")

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate clock format and field ranges"""
        v = v.strip()
        match = _STRICT_CLOCK_RE.match(v)
        if match is None:
            raise ValueError("time must be HH:MM:SS[.mmm] format")
        hours, minutes, seconds = (int(part) for part in match.groups()[:3])
        if hours > 23:
            raise ValueError("hours must be 0-23")
        if minutes > 59:
            raise ValueError("minutes must be 0-59")
        if seconds > 59:
            raise ValueError("seconds must be 0-59")
        return v

    @model_validator(mode="after")
    def validate_seconds_match_clock(self) -> Self:
        """time_seconds is informational but must describe the same instant"""
        hours, minutes, rest = self.time.split(":")
        clock_seconds = int(hours) * 3600 + int(minutes) * 60 + float(rest)
        if abs(clock_seconds - self.time_seconds) >= 1:
            raise ValueError(
                f"time_seconds {self.time_seconds} does not match time {self.time}"
            )
        return self


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def sanitize_string(value: str, max_length: int = 255) -> str:
        """Sanitize string input"""
        if not isinstance(value, str):
            return str(value)[:max_length]

        # Strip whitespace
        value = value.strip()

        # Limit length
        value = value[:max_length]

        # Remove null bytes
        value = value.replace("\0", "")

        return value

    @staticmethod
    def validate_time_log_input(payload: dict) -> TimeLogInput:
        """
        Validate a judge time-log payload

        Returns:
            TimeLogInput: Validated payload

        Raises:
            ValueError: If validation fails
        """
        try:
            return TimeLogInput(**payload)
        except Exception as e:
            logger.warning(f"Time log validation failed: {e}")
            raise ValueError(f"Invalid time log: {str(e)}")

    @staticmethod
    def validate_heat_input(payload: dict) -> HeatInput:
        """
        Validate a new heat

        Raises:
            ValueError: If validation fails
        """
        try:
            return HeatInput(**payload)
        except Exception as e:
            logger.warning(f"Heat validation failed: {e}")
            raise ValueError(f"Invalid heat: {str(e)}")


class RecordSanitizer:
    """Converts raw store rows into record types, skipping rows that do not validate."""

    @staticmethod
    def to_player(raw: dict) -> Player:
        rec = PlayerRecord.model_validate(raw)
        return Player(id=rec.id, name=rec.name, image_url=rec.image_url, fun_fact=rec.fun_fact)

    @staticmethod
    def to_team(raw: dict) -> Team:
        rec = TeamRecord.model_validate(raw)
        return Team(
            id=rec.id,
            name=rec.name,
            player_ids=(rec.player_1_id, rec.player_2_id, rec.player_3_id, rec.player_4_id),
            image_url=rec.image_url,
            is_out=rec.is_out,
        )

    @staticmethod
    def to_heat(raw: dict) -> Heat:
        rec = HeatRecord.model_validate(raw)
        return Heat(id=rec.id, heat=rec.heat, date=rec.date, is_current=rec.is_current, name=rec.name)

    @staticmethod
    def to_time_type(raw: dict) -> TimeType:
        rec = TimeTypeRecord.model_validate(raw)
        return TimeType(id=rec.id, name=rec.name, time_eng=rec.time_eng)

    @staticmethod
    def to_time_log(raw: dict) -> TimeLog:
        rec = TimeLogRecord.model_validate(raw)
        return TimeLog(
            id=rec.id,
            player_id=rec.player_id,
            heat_id=rec.heat_id,
            time_type_id=rec.time_type_id,
            time_seconds=rec.time_seconds,
            time=rec.time,
            team_id=rec.team_id,
            creation_time=rec.creation_time,
        )

    @staticmethod
    def parse_many(rows: List[dict], convert: Callable[[dict], R], kind: str) -> List[R]:
        """Convert every row; invalid rows are logged and dropped."""
        parsed: List[R] = []
        for i, row in enumerate(rows or []):
            if not isinstance(row, dict):
                logger.warning(f"Skipping {kind} row {i}: not a mapping")
                continue
            try:
                parsed.append(convert(row))
            except ValueError as e:
                logger.warning(f"Skipping {kind} row {i}: {e}")
        return parsed


# ==================== EXPORT ====================

__all__ = [
    "PlayerRecord",
    "TeamRecord",
    "HeatRecord",
    "HeatInput",
    "TimeTypeRecord",
    "TimeLogRecord",
    "TimeLogInput",
    "InputSanitizer",
    "RecordSanitizer",
]
