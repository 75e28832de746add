"""Integration tests: entity editor and marker pipeline over the SQL record store."""
import pytest

from repositories.document_repository import get_document, put_document
from slipway_core.editor import Author, EntityEditor, SlipwayDraft
from slipway_core.entity import EntityNotFound, EntityValidationError
from slipway_core.marker_pipeline import load_entities
from slipway_core.record_store import COORDINATES, DETAILS, SqlRecordStore

pytestmark = pytest.mark.integration


@pytest.fixture
def store(db_session):
    return SqlRecordStore(db_session)


@pytest.fixture
def editor(store):
    return EntityEditor(store)


def _seed(db_session, slipway_id="s1", **details):
    put_document(db_session, COORDINATES, slipway_id, ["50.37", "-4.14"])
    put_document(db_session, DETAILS, slipway_id, {"Name": "Plymouth Hoe", "imgs": [], "comments": [], **details})


async def test_create_writes_coordinates_then_details(editor, db_session):
    draft = SlipwayDraft(latitude=50.5, longitude=-4.25, name="  New Slip ", facilities="Parking, , Fuel")
    slipway_id = await editor.create_entity(draft)
    assert get_document(db_session, COORDINATES, slipway_id).value == ["50.5", "-4.25"]
    details = get_document(db_session, DETAILS, slipway_id).value
    assert details["Name"] == "New Slip"
    assert details["Description"] == "No description provided"
    assert details["Facilities"] == "Parking, Fuel"
    assert details["imgs"] == [] and details["comments"] == []


async def test_create_requires_name(editor, store):
    with pytest.raises(EntityValidationError, match="Slipway name is required"):
        await editor.create_entity(SlipwayDraft(latitude=1.0, longitude=2.0, name="   "))
    assert await store.read_collection(COORDINATES) is None


async def test_created_slipway_appears_in_pipeline(editor, store):
    await editor.create_entity(SlipwayDraft(latitude=50.5, longitude=-4.25, name="Fresh"))
    result = await load_entities(store)
    assert result.failed is False
    assert [e.name for e in result.entities] == ["Fresh"]


async def test_get_entity(editor, db_session):
    _seed(db_session, Facilities="Toilets, Café")
    entity = await editor.get_entity("s1")
    assert entity.name == "Plymouth Hoe"
    assert entity.latitude == pytest.approx(50.37)
    assert entity.facilities == ["Toilets", "Café"]


async def test_get_orphan_is_not_found(editor, db_session):
    put_document(db_session, COORDINATES, "orphan", ["1", "2"])
    with pytest.raises(EntityNotFound):
        await editor.get_entity("orphan")


async def test_save_overwrites_details_keeping_images(editor, db_session):
    _seed(db_session, Charges="£5", imgs=["img-1"])
    entity = await editor.get_entity("s1")
    entity.charges = "Free"
    entity.facilities = ["Parking"]
    await editor.save_entity(entity)
    details = get_document(db_session, DETAILS, "s1").value
    assert details["Charges"] == "Free"
    assert details["Facilities"] == "Parking"
    assert details["imgs"] == ["img-1"]


async def test_last_writer_wins(editor, db_session):
    """Two editors that read the same record: the second save discards the first one's change."""
    _seed(db_session)
    first = await editor.get_entity("s1")
    second = await editor.get_entity("s1")
    first.charges = "£3"
    second.website = "https://example.com"
    await editor.save_entity(first)
    await editor.save_entity(second)
    details = get_document(db_session, DETAILS, "s1").value
    assert details["Website"] == "https://example.com"
    assert details["Charges"] != "£3"


async def test_append_image(editor, db_session):
    _seed(db_session, imgs=["a"])
    assert await editor.append_image("s1", "b") == ["a", "b"]
    assert get_document(db_session, DETAILS, "s1").value["imgs"] == ["a", "b"]


async def test_add_comment_appends_with_timestamp(editor, db_session):
    _seed(db_session)
    author = Author(user_id="u1", name="Ann", email="ann@example.com")
    c1 = await editor.add_comment("s1", author, " Great slip ", rating=5)
    c2 = await editor.add_comment("s1", author, "Muddy at low tide")
    comments = get_document(db_session, DETAILS, "s1").value["comments"]
    assert [c["id"] for c in comments] == [c1.id, c2.id]
    assert comments[0]["text"] == "Great slip"
    assert comments[0]["rating"] == 5
    assert "rating" not in comments[1]
    assert comments[0]["timestamp"] > 0
    assert comments[0]["timestamp"] <= comments[1]["timestamp"]


@pytest.mark.parametrize("rating", [0, 6])
async def test_add_comment_rejects_rating_out_of_range(editor, db_session, rating):
    _seed(db_session)
    with pytest.raises(EntityValidationError):
        await editor.add_comment("s1", Author(user_id="u1"), "text", rating=rating)
