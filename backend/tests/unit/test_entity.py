"""Unit tests: slipway entity mapping to and from the details record."""
import pytest

from slipway_core.entity import Comment, Entity, join_facilities, parse_facilities

pytestmark = pytest.mark.unit


def test_facilities_round_trip_drops_empty_segments():
    """'Parking, Toilets, , Café' parses to three entries, order kept, and joins back."""
    facilities = parse_facilities("Parking, Toilets, , Café")
    assert facilities == ["Parking", "Toilets", "Café"]
    assert parse_facilities(join_facilities(facilities)) == ["Parking", "Toilets", "Café"]
    assert join_facilities(facilities) == "Parking, Toilets, Café"


def test_facilities_without_space_after_comma():
    assert parse_facilities("Fuel,Crane ,  ,Slip") == ["Fuel", "Crane", "Slip"]


@pytest.mark.parametrize("raw", [None, "", "  ,  , "])
def test_facilities_empty(raw):
    assert parse_facilities(raw) == []


def test_from_records_fills_defaults():
    """Missing text fields fall back to Unknown / no-description / empty string."""
    e = Entity.from_records("x", 1.0, 2.0, {})
    assert e.name == "Unknown"
    assert e.description == "No description available"
    assert e.charges == "Unknown"
    assert e.suitability == "Unknown"
    assert e.ramp_length == ""
    assert e.website == ""
    assert e.facilities == []
    assert e.imgs == []
    assert e.comments == []


def test_from_records_reads_legacy_image_ids():
    e = Entity.from_records("x", 1.0, 2.0, {"ImageIds": ["a", "b"]})
    assert e.imgs == ["a", "b"]


def test_from_records_prefers_imgs():
    e = Entity.from_records("x", 1.0, 2.0, {"imgs": ["new"], "ImageIds": ["old"]})
    assert e.imgs == ["new"]


def test_to_details_writes_capitalized_fields():
    e = Entity(
        id="x",
        latitude=1.0,
        longitude=2.0,
        name="Quay",
        description="Steep",
        facilities=["Parking", "Toilets"],
        ramp_length="1/2 tidal",
        imgs=["img-1"],
    )
    details = e.to_details()
    assert details["Name"] == "Quay"
    assert details["Facilities"] == "Parking, Toilets"
    assert details["RampLength"] == "1/2 tidal"
    assert details["RampDescription"] == "Steep"
    assert details["imgs"] == ["img-1"]
    assert details["comments"] == []


def test_comment_record_round_trip_keeps_rating():
    record = {
        "id": "c1",
        "userId": "u1",
        "userName": "Ann",
        "userEmail": "ann@example.com",
        "text": "Good slip",
        "timestamp": 1700000000000,
        "rating": 4,
    }
    comment = Comment.from_record(record)
    assert comment.rating == 4
    assert comment.to_record() == record


def test_comment_without_rating_omits_key():
    comment = Comment(id="c", user_id="u", user_name="n", text="t", timestamp=1)
    assert "rating" not in comment.to_record()


@pytest.mark.parametrize("rating", ["five", "", 0, 9, [4]])
def test_comment_with_unusable_rating_has_none(rating):
    comment = Comment.from_record({"id": "c", "text": "ok", "rating": rating, "timestamp": 5})
    assert comment.rating is None
    assert comment.timestamp == 5


def test_comment_with_unparseable_timestamp_gets_zero():
    comment = Comment.from_record({"id": "c", "text": "ok", "timestamp": "yesterday", "rating": "3"})
    assert comment.timestamp == 0
    assert comment.rating == 3


def test_from_records_for_edit_keeps_missing_fields_empty():
    """Only a missing name gets a placeholder, so saving does not store display text."""
    e = Entity.from_records("x", 1.0, 2.0, {"Name": "Quay"}, for_edit=True)
    assert e.name == "Quay"
    assert e.description == ""
    assert e.charges == ""
    assert e.suitability == ""
    details = e.to_details()
    assert details["Suitability"] == ""
    assert details["Charges"] == ""
    assert details["Description"] == ""
    assert Entity.from_records("y", 1.0, 2.0, {}, for_edit=True).name == "Unknown"
