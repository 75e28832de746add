"""Pydantic schemas for slipway API."""
from pydantic import BaseModel, Field


class SlipwayFields(BaseModel):
    """Editable text fields shared by create and update."""

    name: str
    description: str = ""
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


class SlipwayCreate(SlipwayFields):
    """Payload for adding a slipway at a clicked map position. facilities is the comma-joined form text."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    facilities: str = ""


class SlipwayUpdate(BaseModel):
    """Payload for edit-save. Omitted fields keep their current value; the stored record is still fully rewritten."""

    name: str | None = None
    description: str | None = None
    facilities: list[str] | None = None
    charges: str | None = None
    nearest_place: str | None = None
    ramp_type: str | None = None
    suitability: str | None = None
    ramp_length: str | None = None
    ramp_description: str | None = None
    upper_area: str | None = None
    lower_area: str | None = None
    directions: str | None = None
    email: str | None = None
    mobile_phone_number: str | None = None
    navigational_hazards: str | None = None
    website: str | None = None


class CommentCreate(BaseModel):
    text: str
    rating: int | None = Field(default=None, ge=1, le=5)


class CommentResponse(BaseModel):
    id: str
    user_id: str
    user_name: str
    text: str
    timestamp: int
    rating: int | None = None


class ImageUrl(BaseModel):
    id: str
    src: str


class ImageRegister(BaseModel):
    """Image id whose transfer to storage has already succeeded."""

    image_id: str = Field(min_length=1)


class MarkerResponse(BaseModel):
    id: str
    latitude: float
    longitude: float
    name: str
    description: str
    photo_count: int = 0
    icon: str = "default"
    suitability: str = ""
    ramp_length: str = ""
    facilities: list[str] = []


class MarkerListResponse(BaseModel):
    """Markers after filtering. loaded is False when the sample set stands in for the store."""

    loaded: bool
    error: str | None = None
    total: int
    markers: list[MarkerResponse]


class FilterOptions(BaseModel):
    ramp_lengths: list[str]
    suitability: list[str]


class CenterOn(BaseModel):
    id: str
    latitude: float
    longitude: float
    name: str


class SlipwayCreated(BaseModel):
    id: str
    center_on: CenterOn


class SlipwayDetail(BaseModel):
    """Full slipway in API responses."""

    id: str
    latitude: float
    longitude: float
    name: str
    description: str
    facilities: list[str] = []
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
    images: list[ImageUrl] = []
    comments: list[CommentResponse] = []
