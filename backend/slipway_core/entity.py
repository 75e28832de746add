"""Slipway entity and comment records, and their mapping to the stored details document."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

UNKNOWN = "Unknown"
NO_DESCRIPTION = "No description available"

# Stored details field -> Entity attribute, for the plain text fields.
TEXT_FIELDS: dict[str, str] = {
    "Name": "name",
    "Description": "description",
    "RampDescription": "ramp_description",
    "Charges": "charges",
    "NearestPlace": "nearest_place",
    "RampType": "ramp_type",
    "Suitability": "suitability",
    "RampLength": "ramp_length",
    "UpperArea": "upper_area",
    "LowerArea": "lower_area",
    "Directions": "directions",
    "Email": "email",
    "MobilePhoneNumber": "mobile_phone_number",
    "NavigationalHazards": "navigational_hazards",
    "Website": "website",
}

# Display placeholders for a field the details record omits.
_READ_DEFAULTS: dict[str, str] = {
    "name": UNKNOWN,
    "description": NO_DESCRIPTION,
    "charges": UNKNOWN,
    "nearest_place": UNKNOWN,
    "ramp_type": UNKNOWN,
    "suitability": UNKNOWN,
}

# The edit form shows only a missing name as a placeholder; other gaps stay empty.
_EDIT_DEFAULTS: dict[str, str] = {"name": UNKNOWN}


class EntityNotFound(LookupError):
    """No slipway with both coordinates and details exists for the id."""


class EntityValidationError(ValueError):
    """User input for a slipway or comment is incomplete or out of range."""


def _int_or(value: Any, default: Optional[int]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_facilities(raw: Any) -> list[str]:
    """Split a comma-joined facilities string into a list, dropping empty entries."""
    if not raw:
        return []
    if isinstance(raw, list):
        parts = [str(p) for p in raw]
    else:
        parts = str(raw).split(",")
    return [p.strip() for p in parts if p and p.strip()]


def join_facilities(facilities: list[str] | None) -> str:
    """Flatten a facilities list back to the stored comma-joined string."""
    return ", ".join(parse_facilities(facilities or []))


@dataclass(frozen=True)
class Comment:
    id: str
    user_id: str
    user_name: str
    text: str
    timestamp: int
    user_email: str = ""
    rating: Optional[int] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Comment":
        rating = _int_or(record.get("rating"), None)
        return cls(
            id=str(record.get("id", "")),
            user_id=str(record.get("userId", "")),
            user_name=str(record.get("userName", "")),
            user_email=str(record.get("userEmail", "")),
            text=str(record.get("text", "")),
            timestamp=_int_or(record.get("timestamp"), 0),
            rating=rating if rating is not None and 1 <= rating <= 5 else None,
        )

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "text": self.text,
            "timestamp": self.timestamp,
        }
        if self.rating is not None:
            record["rating"] = self.rating
        return record


def _comments_from(raw: Any) -> list[Comment]:
    if isinstance(raw, dict):
        raw = list(raw.values())
    if not isinstance(raw, list):
        return []
    return [Comment.from_record(c) for c in raw if isinstance(c, dict)]


def _image_ids_from(details: dict[str, Any]) -> list[str]:
    raw = details.get("imgs") or details.get("ImageIds") or []
    if isinstance(raw, dict):
        raw = list(raw.values())
    if not isinstance(raw, list):
        return []
    return [str(i) for i in raw if i]


@dataclass
class Entity:
    """A slipway: position plus the fields of its details record."""

    id: str
    latitude: float
    longitude: float
    name: str = UNKNOWN
    description: str = NO_DESCRIPTION
    facilities: list[str] = field(default_factory=list)
    charges: str = ""
    nearest_place: str = ""
    ramp_type: str = ""
    suitability: str = ""
    ramp_length: str = ""
    ramp_description: str = ""
    upper_area: str = ""
    lower_area: str = ""
    directions: str = ""
    email: str = ""
    mobile_phone_number: str = ""
    navigational_hazards: str = ""
    website: str = ""
    imgs: list[str] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)

    @property
    def photo_count(self) -> int:
        return len(self.imgs)

    @classmethod
    def from_records(
        cls,
        entity_id: str,
        latitude: float,
        longitude: float,
        details: dict[str, Any],
        for_edit: bool = False,
    ) -> "Entity":
        """Build an entity from a parsed position and a raw details record.

        Missing text fields get the display placeholders, or with for_edit only the
        name does, so a later whole-record save does not store them.
        """
        defaults = _EDIT_DEFAULTS if for_edit else _READ_DEFAULTS
        values: dict[str, Any] = {}
        for stored, attr in TEXT_FIELDS.items():
            raw = details.get(stored)
            values[attr] = str(raw) if raw else defaults.get(attr, "")
        return cls(
            id=entity_id,
            latitude=latitude,
            longitude=longitude,
            facilities=parse_facilities(details.get("Facilities")),
            imgs=_image_ids_from(details),
            comments=_comments_from(details.get("comments")),
            **values,
        )

    def to_details(self) -> dict[str, Any]:
        """Full details record for a whole-record overwrite."""
        record: dict[str, Any] = {stored: getattr(self, attr) for stored, attr in TEXT_FIELDS.items()}
        record["RampDescription"] = self.ramp_description or self.description
        record["Facilities"] = join_facilities(self.facilities)
        record["imgs"] = list(self.imgs)
        record["comments"] = [c.to_record() for c in self.comments]
        return record
