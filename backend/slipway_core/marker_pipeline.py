"""Marker pipeline: join the coordinate and details tables, filter, and build renderable markers."""
from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from slipway_core.entity import Entity
from slipway_core.record_store import COORDINATES, DETAILS, RecordStore, RecordStoreError

LOG = logging.getLogger(__name__)

PORTABLE_ONLY = "Portable Only"
SMALL_TRAILER = "Small trailer can be pushed"
LARGE_TRAILER = "Large trailer needs a car"

# Least to most demanding. A selected tier admits itself and every tier after it.
SUITABILITY_TIERS: tuple[str, ...] = (PORTABLE_ONLY, SMALL_TRAILER, LARGE_TRAILER)

RAMP_LENGTHS: tuple[str, ...] = (
    "All of tidal range",
    "3/4 tidal",
    "1/2 tidal",
    "1/4 tidal",
    "Non-tidal",
)

LOAD_FAILED_MESSAGE = "Failed to load slipway data"
DESCRIPTION_MAX_LENGTH = 200

FALLBACK_ENTITIES: tuple[Entity, ...] = (
    Entity(
        id="1",
        name="Sample Slipway 1",
        description="A beautiful slipway with great facilities",
        latitude=51.505,
        longitude=-0.09,
    ),
    Entity(
        id="2",
        name="Sample Slipway 2",
        description="Another great slipway with stunning views",
        latitude=51.515,
        longitude=-0.1,
    ),
    Entity(
        id="3",
        name="Sample Slipway 3",
        description="Perfect for launching boats",
        latitude=51.525,
        longitude=-0.11,
    ),
)


def as_mapping(table: Any) -> dict[str, Any]:
    """Normalize a collection to {id: value}. Arrays (numeric keys) become index-keyed, null holes dropped."""
    if isinstance(table, dict):
        return {str(k): v for k, v in table.items() if v is not None}
    if isinstance(table, list):
        return {str(i): v for i, v in enumerate(table) if v is not None}
    return {}


def parse_coordinates(coords: Any) -> Optional[tuple[float, float]]:
    """Return (lat, lng) from a stored pair, or None if it is short or not numeric."""
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    try:
        lat = float(coords[0])
        lng = float(coords[1])
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return lat, lng


def join(coords: Any, details: Any) -> list[Entity]:
    """One entity per id present in both tables with a parseable coordinate pair, in coordinate-table order."""
    coords_by_id = as_mapping(coords)
    details_by_id = as_mapping(details)
    entities: list[Entity] = []
    for entity_id, raw_coords in coords_by_id.items():
        record = details_by_id.get(entity_id)
        if not isinstance(record, dict):
            continue
        position = parse_coordinates(raw_coords)
        if position is None:
            LOG.debug("skipping slipway %s: bad coordinates %r", entity_id, raw_coords)
            continue
        entities.append(Entity.from_records(entity_id, position[0], position[1], record))
    return entities


def suitability_admits(selected: Optional[str], value: Optional[str]) -> bool:
    """Hierarchical suitability match. No selection admits everything."""
    if not selected:
        return True
    if selected == PORTABLE_ONLY:
        return True
    if not value or selected not in SUITABILITY_TIERS:
        return False
    admitted = SUITABILITY_TIERS[SUITABILITY_TIERS.index(selected):]
    return value in admitted


def filter_entities(
    entities: Iterable[Entity],
    ramp_length: Optional[str] = None,
    suitability: Optional[str] = None,
) -> list[Entity]:
    """Apply the ramp-length and suitability filters (AND). Order is preserved."""
    filtered = list(entities)
    if ramp_length:
        filtered = [e for e in filtered if e.ramp_length and e.ramp_length == ramp_length]
    if suitability:
        filtered = [e for e in filtered if suitability_admits(suitability, e.suitability)]
    return filtered


@dataclass
class LoadResult:
    entities: list[Entity]
    failed: bool = False
    error: Optional[str] = None


async def load_entities(store: RecordStore) -> LoadResult:
    """Read both tables concurrently and join them. Falls back to the sample set on any failure."""
    try:
        coords, details = await asyncio.gather(
            store.read_collection(COORDINATES),
            store.read_collection(DETAILS),
        )
        if not coords or not details:
            raise RecordStoreError("No slipway data found in database")
    except RecordStoreError as err:
        LOG.warning("Error fetching slipways, using sample data: %s", err)
        return LoadResult(
            entities=[_copy(sample) for sample in FALLBACK_ENTITIES],
            failed=True,
            error=LOAD_FAILED_MESSAGE,
        )
    entities = join(coords, details)
    LOG.info("Loaded %d slipways", len(entities))
    return LoadResult(entities=entities)


def _copy(entity: Entity) -> Entity:
    return Entity(
        id=entity.id,
        name=entity.name,
        description=entity.description,
        latitude=entity.latitude,
        longitude=entity.longitude,
    )


def truncate_text(text: str, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + "..."


@dataclass(frozen=True)
class Marker:
    id: str
    latitude: float
    longitude: float
    name: str
    description: str
    photo_count: int
    icon: str
    suitability: str = ""
    ramp_length: str = ""
    facilities: list[str] = field(default_factory=list)


def build_markers(entities: Iterable[Entity]) -> list[Marker]:
    """Renderable marker per entity; entities with photos get the photo icon."""
    return [
        Marker(
            id=e.id,
            latitude=e.latitude,
            longitude=e.longitude,
            name=e.name,
            description=truncate_text(e.description),
            photo_count=e.photo_count,
            icon="photos" if e.photo_count > 0 else "default",
            suitability=e.suitability,
            ramp_length=e.ramp_length,
            facilities=list(e.facilities),
        )
        for e in entities
    ]
