# Schemas package
from .health import HealthResponse
from .slipways import MarkerListResponse, MarkerResponse, SlipwayCreate, SlipwayDetail, SlipwayUpdate
from .uploads import SignError, SignResponse

__all__ = [
    "HealthResponse",
    "MarkerListResponse",
    "MarkerResponse",
    "SignError",
    "SignResponse",
    "SlipwayCreate",
    "SlipwayDetail",
    "SlipwayUpdate",
]
