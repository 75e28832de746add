"""Transient map view state: selection, add-mode, center-on requests and the banner."""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Callable, Optional

from slipway_core.entity import Entity

CENTER_ZOOM = 15
PREVIEW_ID = "preview"


@dataclass(frozen=True)
class CenterRequest:
    """Ask the render layer to re-center. token differs on every request, even for the same position."""

    entity_id: str
    latitude: float
    longitude: float
    name: str
    token: int


@dataclass(frozen=True)
class DraftLocation:
    latitude: float
    longitude: float


class MapViewState:
    """Per-client view state. Not persisted."""

    def __init__(self) -> None:
        self.selected: Optional[Entity] = None
        self.add_mode = False
        self.banner: Optional[str] = None
        self._center_request: Optional[CenterRequest] = None
        self._tokens = itertools.count(1)

    def select(self, entity: Entity) -> None:
        """Open the detail overlay for entity, replacing any open one."""
        self.selected = entity
        self.add_mode = False

    def clear_selection(self) -> None:
        self.selected = None

    def toggle_add_mode(self) -> bool:
        self.add_mode = not self.add_mode
        if self.add_mode:
            self.selected = None
        return self.add_mode

    def handle_map_click(self, latitude: float, longitude: float) -> Optional[DraftLocation]:
        """Start a new-slipway draft at the click when add-mode is on; otherwise nothing happens."""
        if not self.add_mode:
            return None
        self.add_mode = False
        return DraftLocation(latitude=latitude, longitude=longitude)

    def request_center(self, entity_id: str, latitude: float, longitude: float, name: str = "") -> CenterRequest:
        request = CenterRequest(
            entity_id=entity_id,
            latitude=latitude,
            longitude=longitude,
            name=name,
            token=next(self._tokens),
        )
        self._center_request = request
        if entity_id != PREVIEW_ID:
            self.banner = f'Successfully added "{name}"!'
        return request

    @property
    def pending_center(self) -> Optional[CenterRequest]:
        return self._center_request

    def consume_center_request(self) -> Optional[CenterRequest]:
        """Return the pending request once and clear it."""
        request, self._center_request = self._center_request, None
        return request

    def show_load_failure(self, message: str) -> None:
        self.banner = message

    def dismiss_banner(self) -> None:
        self.banner = None


class MapRecenter:
    """Render-layer side of centering: fires on_recenter once per new request token."""

    def __init__(self, on_recenter: Callable[[float, float, int], None], zoom: int = CENTER_ZOOM) -> None:
        self._on_recenter = on_recenter
        self._zoom = zoom
        self._last_token: Optional[int] = None

    def sync(self, state: MapViewState) -> bool:
        request = state.consume_center_request()
        if request is None or request.token == self._last_token:
            return False
        self._last_token = request.token
        self._on_recenter(request.latitude, request.longitude, self._zoom)
        return True
