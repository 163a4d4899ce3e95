import math
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_COUNT_RE = re.compile(r"^([\d.]+)\s*([km])?$", re.IGNORECASE)
_COUNT_SCALE = {"k": 1_000, "m": 1_000_000}


class EnrichmentStage(str, Enum):
    """Stages of the per-event enrichment chain, in execution order."""

    EVENT = "event"
    """Event detail page: event name and organizer link."""

    ORGANIZER = "organizer"
    """Organizer profile on the listing site."""

    WEBSITE = "website"
    """Organizer's own website, scraped for contact details."""

    SOCIAL = "social"
    """Fallback: the social profile's About section."""

    DONE = "done"


class _Partial(BaseModel):
    """Base for stage payloads: every field optional, unknown keys ignored."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value or value.lower() in ("null", "none", "n/a"):
                return None
        return value


def _parse_count(value: Any) -> Optional[int]:
    """Normalize follower/event counts such as ``"1,204"`` or ``"1.2k"``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None

    match = _COUNT_RE.match(value.replace(",", "").strip())
    if not match:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        return None
    suffix = (match.group(2) or "").lower()
    number *= _COUNT_SCALE.get(suffix, 1)
    return int(number) if math.isfinite(number) else None


class EventDetails(_Partial):
    event_name: Optional[str] = None
    organizer_name: Optional[str] = None
    organizer_url: Optional[str] = Field(None, description="The /o/... organizer link")


class OrganizerInfo(_Partial):
    organizer_name: Optional[str] = None
    website: Optional[str] = Field(None, description="External organizer website")
    facebook: Optional[str] = None
    follower_count: Optional[int] = None
    total_events: Optional[int] = None

    @field_validator("follower_count", "total_events", mode="before")
    @classmethod
    def _count(cls, value: Any) -> Optional[int]:
        return _parse_count(value)


class ContactInfo(_Partial):
    """Contact details from the organizer website or its social profile."""

    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    facebook: Optional[str] = None


class EventRecord(BaseModel):
    """One output row: an event fused with its organizer and contact details."""

    model_config = ConfigDict(frozen=True)

    event_name: str = ""
    event_url: str
    organizer_name: str = ""
    organizer_url: str = ""
    organizer_website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    facebook: Optional[str] = None
    follower_count: int = 0
    total_events: int = 0
