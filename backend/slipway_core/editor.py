"""Entity editor: read one slipway, create, save, append images and comments."""
from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from slipway_core.entity import (
    Comment,
    Entity,
    EntityNotFound,
    EntityValidationError,
    join_facilities,
    parse_facilities,
)
from slipway_core.marker_pipeline import parse_coordinates
from slipway_core.record_store import COORDINATES, DETAILS, RecordStore

LOG = logging.getLogger(__name__)

NO_DESCRIPTION_PROVIDED = "No description provided"


@dataclass(frozen=True)
class Author:
    """Identity handed over by the authentication provider."""

    user_id: str
    name: str = ""
    email: str = ""


@dataclass
class SlipwayDraft:
    """Form input for a new slipway at a clicked map position."""

    latitude: float
    longitude: float
    name: str
    description: str = ""
    facilities: str = ""
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

    def to_details(self) -> dict[str, Any]:
        description = self.description.strip()
        return {
            "Name": self.name.strip(),
            "Description": description or NO_DESCRIPTION_PROVIDED,
            "RampDescription": self.ramp_description.strip() or description,
            "Facilities": join_facilities(parse_facilities(self.facilities)),
            "Charges": self.charges.strip(),
            "NearestPlace": self.nearest_place.strip(),
            "RampType": self.ramp_type,
            "Suitability": self.suitability,
            "RampLength": self.ramp_length,
            "UpperArea": self.upper_area,
            "LowerArea": self.lower_area,
            "Directions": self.directions.strip(),
            "Email": self.email.strip(),
            "MobilePhoneNumber": self.mobile_phone_number.strip(),
            "Website": self.website.strip(),
            "NavigationalHazards": self.navigational_hazards.strip(),
            "imgs": [],
            "comments": [],
        }


class EntityEditor:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def get_entity(self, entity_id: str, for_edit: bool = False) -> Entity:
        """Load one slipway. for_edit keeps missing fields empty for a later save_entity."""
        coords, details = await asyncio.gather(
            self._store.read(COORDINATES, entity_id),
            self._store.read(DETAILS, entity_id),
        )
        position = parse_coordinates(coords)
        if position is None or not isinstance(details, dict):
            raise EntityNotFound(entity_id)
        return Entity.from_records(entity_id, position[0], position[1], details, for_edit=for_edit)

    async def create_entity(self, draft: SlipwayDraft) -> str:
        """Push the coordinates (the store assigns the id), then write the details.

        The two writes are not transactional: a failure after the first leaves an
        orphaned coordinate pair, which the marker pipeline skips.
        """
        if not draft.name or not draft.name.strip():
            raise EntityValidationError("Slipway name is required")
        entity_id = await self._store.push(
            COORDINATES,
            [str(draft.latitude), str(draft.longitude)],
        )
        await self._store.write(DETAILS, entity_id, draft.to_details())
        LOG.info("Created slipway %s (%s)", entity_id, draft.name.strip())
        return entity_id

    async def save_entity(self, entity: Entity) -> None:
        """Overwrite the whole details record. Last writer wins."""
        if not entity.name or not entity.name.strip():
            raise EntityValidationError("Slipway name is required")
        await self._store.write(DETAILS, entity.id, entity.to_details())

    async def append_image(self, entity_id: str, image_id: str) -> list[str]:
        entity = await self.get_entity(entity_id)
        imgs = [*entity.imgs, image_id]
        await self._store.write_field(DETAILS, entity_id, "imgs", imgs)
        return imgs

    async def add_comment(
        self,
        entity_id: str,
        author: Author,
        text: str,
        rating: Optional[int] = None,
    ) -> Comment:
        if not text or not text.strip():
            raise EntityValidationError("Comment text is required")
        if rating is not None and not 1 <= rating <= 5:
            raise EntityValidationError("Rating must be between 1 and 5")
        entity = await self.get_entity(entity_id)
        comment = Comment(
            id=uuid.uuid4().hex,
            user_id=author.user_id,
            user_name=author.name or author.email or "Anonymous",
            user_email=author.email,
            text=text.strip(),
            timestamp=int(time.time() * 1000),
            rating=rating,
        )
        records = [c.to_record() for c in entity.comments] + [comment.to_record()]
        await self._store.write_field(DETAILS, entity_id, "comments", records)
        return comment
