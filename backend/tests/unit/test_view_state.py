"""Unit tests: map view state and render-side re-centering."""
import pytest

from slipway_core.entity import Entity
from slipway_core.view_state import MapRecenter, MapViewState

pytestmark = pytest.mark.unit


def _entity(entity_id: str) -> Entity:
    return Entity(id=entity_id, latitude=50.0, longitude=-4.0)


def test_recenter_fires_twice_for_same_position_with_new_tokens():
    """Two requests for identical coordinates are distinct and each re-centers the map."""
    state = MapViewState()
    calls = []
    recenter = MapRecenter(lambda lat, lng, zoom: calls.append((lat, lng, zoom)))

    first = state.request_center("slip-1", 50.1, -5.2, "Harbour Slip")
    assert recenter.sync(state) is True
    second = state.request_center("slip-1", 50.1, -5.2, "Harbour Slip")
    assert recenter.sync(state) is True

    assert first.token != second.token
    assert (first.latitude, first.longitude) == (second.latitude, second.longitude)
    assert calls == [(50.1, -5.2, 15), (50.1, -5.2, 15)]


def test_center_request_consumed_once():
    state = MapViewState()
    calls = []
    recenter = MapRecenter(lambda lat, lng, zoom: calls.append(lat))
    state.request_center("slip-1", 1.0, 2.0)
    assert recenter.sync(state) is True
    assert state.pending_center is None
    assert recenter.sync(state) is False
    assert calls == [1.0]


def test_request_center_sets_success_banner():
    state = MapViewState()
    state.request_center("slip-9", 1.0, 2.0, "New Slip")
    assert state.banner == 'Successfully added "New Slip"!'


def test_preview_center_has_no_banner():
    state = MapViewState()
    state.request_center("preview", 1.0, 2.0, "Draft")
    assert state.banner is None


def test_new_selection_replaces_previous():
    state = MapViewState()
    state.select(_entity("a"))
    state.select(_entity("b"))
    assert state.selected.id == "b"
    state.clear_selection()
    assert state.selected is None


def test_map_click_ignored_outside_add_mode():
    state = MapViewState()
    assert state.handle_map_click(50.0, -4.0) is None


def test_map_click_in_add_mode_returns_draft_and_leaves_mode():
    state = MapViewState()
    assert state.toggle_add_mode() is True
    draft = state.handle_map_click(50.5, -4.5)
    assert (draft.latitude, draft.longitude) == (50.5, -4.5)
    assert state.add_mode is False
    assert state.handle_map_click(50.5, -4.5) is None


def test_add_mode_and_selection_exclude_each_other():
    state = MapViewState()
    state.select(_entity("a"))
    state.toggle_add_mode()
    assert state.selected is None
    state.select(_entity("b"))
    assert state.add_mode is False


def test_load_failure_banner():
    state = MapViewState()
    state.show_load_failure("Failed to load slipway data")
    assert state.banner == "Failed to load slipway data"
    state.dismiss_banner()
    assert state.banner is None
