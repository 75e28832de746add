"""Slipway API routes: markers, detail, add, edit, comments, images."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_record_store, require_user
from schemas.slipways import (
    CenterOn,
    CommentCreate,
    CommentResponse,
    FilterOptions,
    ImageRegister,
    ImageUrl,
    MarkerListResponse,
    MarkerResponse,
    SlipwayCreate,
    SlipwayCreated,
    SlipwayDetail,
    SlipwayUpdate,
)
from slipway_core.editor import Author, EntityEditor, SlipwayDraft
from slipway_core.entity import Comment, Entity, EntityNotFound, EntityValidationError, parse_facilities
from slipway_core.images import resolve_images
from slipway_core.marker_pipeline import (
    RAMP_LENGTHS,
    SUITABILITY_TIERS,
    build_markers,
    filter_entities,
    load_entities,
)
from slipway_core.record_store import RecordStore, RecordStoreError

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/slipways", tags=["slipways"])

SAVE_FAILED = "Failed to save changes. Please try again."
LOAD_FAILED = "Failed to load slipway data. Please try again."


def _comment_response(c: Comment) -> CommentResponse:
    return CommentResponse(
        id=c.id,
        user_id=c.user_id,
        user_name=c.user_name,
        text=c.text,
        timestamp=c.timestamp,
        rating=c.rating,
    )


def _image_urls(image_ids: list[str]) -> list[ImageUrl]:
    return [ImageUrl(id=ref.id, src=ref.src) for ref in resolve_images(image_ids)]


def _detail(entity: Entity) -> SlipwayDetail:
    return SlipwayDetail(
        id=entity.id,
        latitude=entity.latitude,
        longitude=entity.longitude,
        name=entity.name,
        description=entity.description,
        facilities=entity.facilities,
        charges=entity.charges,
        nearest_place=entity.nearest_place,
        ramp_type=entity.ramp_type,
        suitability=entity.suitability,
        ramp_length=entity.ramp_length,
        ramp_description=entity.ramp_description,
        upper_area=entity.upper_area,
        lower_area=entity.lower_area,
        directions=entity.directions,
        email=entity.email,
        mobile_phone_number=entity.mobile_phone_number,
        navigational_hazards=entity.navigational_hazards,
        website=entity.website,
        images=_image_urls(entity.imgs),
        comments=[_comment_response(c) for c in entity.comments],
    )


async def _get_entity(editor: EntityEditor, slipway_id: str, for_edit: bool = False) -> Entity:
    """Load one slipway or raise 404 / 503."""
    try:
        return await editor.get_entity(slipway_id, for_edit=for_edit)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Slipway not found") from e
    except RecordStoreError as e:
        LOG.error("Error fetching slipway %s: %s", slipway_id, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=LOAD_FAILED) from e


@router.get("", response_model=MarkerListResponse)
async def list_markers(
    ramp_length: str | None = None,
    suitability: str | None = None,
    store: RecordStore = Depends(get_record_store),
) -> MarkerListResponse:
    """Markers for the map after the ramp-length and suitability filters. Falls back to sample slipways."""
    result = await load_entities(store)
    filtered = filter_entities(result.entities, ramp_length=ramp_length, suitability=suitability)
    return MarkerListResponse(
        loaded=not result.failed,
        error=result.error,
        total=len(result.entities),
        markers=[
            MarkerResponse(
                id=m.id,
                latitude=m.latitude,
                longitude=m.longitude,
                name=m.name,
                description=m.description,
                photo_count=m.photo_count,
                icon=m.icon,
                suitability=m.suitability,
                ramp_length=m.ramp_length,
                facilities=m.facilities,
            )
            for m in build_markers(filtered)
        ],
    )


@router.get("/filters", response_model=FilterOptions)
def filter_options() -> FilterOptions:
    """Values offered by the map's filter panel."""
    return FilterOptions(
        ramp_lengths=list(RAMP_LENGTHS),
        suitability=list(reversed(SUITABILITY_TIERS)),
    )


@router.post("", response_model=SlipwayCreated, status_code=status.HTTP_201_CREATED)
async def create_slipway(
    body: SlipwayCreate,
    user: Author = Depends(require_user),
    store: RecordStore = Depends(get_record_store),
) -> SlipwayCreated:
    """Add a slipway. Coordinates and details are two separate writes."""
    editor = EntityEditor(store)
    draft = SlipwayDraft(**body.model_dump())
    try:
        slipway_id = await editor.create_entity(draft)
    except EntityValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except RecordStoreError as e:
        LOG.error("Error saving slipway for %s: %s", user.user_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to save slipway. Please try again.",
        ) from e
    return SlipwayCreated(
        id=slipway_id,
        center_on=CenterOn(
            id=slipway_id,
            latitude=body.latitude,
            longitude=body.longitude,
            name=body.name.strip(),
        ),
    )


@router.get("/{slipway_id}", response_model=SlipwayDetail)
async def get_slipway(slipway_id: str, store: RecordStore = Depends(get_record_store)) -> SlipwayDetail:
    """Full slipway with image URLs and comments."""
    return _detail(await _get_entity(EntityEditor(store), slipway_id))


@router.put("/{slipway_id}", response_model=SlipwayDetail)
async def update_slipway(
    slipway_id: str,
    body: SlipwayUpdate,
    user: Author = Depends(require_user),
    store: RecordStore = Depends(get_record_store),
) -> SlipwayDetail:
    """Edit-save: read the slipway, apply the changes, overwrite the whole details record."""
    editor = EntityEditor(store)
    entity = await _get_entity(editor, slipway_id, for_edit=True)
    for name, value in body.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if name == "facilities":
            value = parse_facilities(value)
        setattr(entity, name, value)
    try:
        await editor.save_entity(entity)
    except EntityValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except RecordStoreError as e:
        LOG.error("Error saving slipway %s for %s: %s", slipway_id, user.user_id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=SAVE_FAILED) from e
    return _detail(entity)


@router.post("/{slipway_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    slipway_id: str,
    body: CommentCreate,
    user: Author = Depends(require_user),
    store: RecordStore = Depends(get_record_store),
) -> CommentResponse:
    """Append a comment (optional 1-5 rating). Comments are never edited."""
    editor = EntityEditor(store)
    try:
        comment = await editor.add_comment(slipway_id, user, body.text, body.rating)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Slipway not found") from e
    except EntityValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except RecordStoreError as e:
        LOG.error("Error saving comment on %s: %s", slipway_id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=SAVE_FAILED) from e
    return _comment_response(comment)


@router.get("/{slipway_id}/images", response_model=list[ImageUrl])
async def list_images(slipway_id: str, store: RecordStore = Depends(get_record_store)) -> list[ImageUrl]:
    entity = await _get_entity(EntityEditor(store), slipway_id)
    return _image_urls(entity.imgs)


@router.post("/{slipway_id}/images", response_model=list[ImageUrl], status_code=status.HTTP_201_CREATED)
async def register_image(
    slipway_id: str,
    body: ImageRegister,
    user: Author = Depends(require_user),
    store: RecordStore = Depends(get_record_store),
) -> list[ImageUrl]:
    """Record an image id after the client's direct transfer to storage has succeeded."""
    editor = EntityEditor(store)
    try:
        imgs = await editor.append_image(slipway_id, body.image_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Slipway not found") from e
    except RecordStoreError as e:
        LOG.error("Error recording image %s on %s: %s", body.image_id, slipway_id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=SAVE_FAILED) from e
    LOG.info("Image %s added to slipway %s by %s", body.image_id, slipway_id, user.user_id)
    return _image_urls(imgs)
