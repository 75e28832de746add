# Slipway core: entities, record store, marker pipeline, view state, editor, upload hand-off
from slipway_core.entity import Comment, Entity, EntityNotFound, EntityValidationError
from slipway_core.marker_pipeline import build_markers, filter_entities, join, load_entities
from slipway_core.record_store import FirebaseRecordStore, RecordStoreError, SqlRecordStore
from slipway_core.view_state import MapRecenter, MapViewState

__all__ = [
    "Comment",
    "Entity",
    "EntityNotFound",
    "EntityValidationError",
    "FirebaseRecordStore",
    "MapRecenter",
    "MapViewState",
    "RecordStoreError",
    "SqlRecordStore",
    "build_markers",
    "filter_entities",
    "join",
    "load_entities",
]
