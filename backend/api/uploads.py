"""Upload signing route: hands the client a pre-signed PUT URL so image bytes never pass through this service."""
import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from schemas.uploads import SignError, SignResponse
from slipway_core.signing import SigningConfigurationError, SigningError, sign_upload
from utils.config import storage_config

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.get(
    "/sign_s3",
    response_model=SignResponse,
    responses={400: {"model": SignError}, 500: {"model": SignError}},
)
def sign_s3(
    file_name: str | None = Query(default=None),
    file_type: str | None = Query(default=None),
):
    """Return {signed_request, url} for a direct PUT of file_name with content type file_type."""
    config = storage_config()
    LOG.info(
        "S3 sign request: file_name=%s file_type=%s bucket=%s",
        file_name,
        file_type,
        "configured" if config.bucket_name else "missing",
    )
    if not file_name or not file_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing file_name or file_type"},
        )
    try:
        signed = sign_upload(config, file_name, file_type)
    except SigningConfigurationError as e:
        LOG.error("%s: %s", e.error, e.details)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": e.error, "details": e.details},
        )
    except SigningError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )
    return SignResponse(signed_request=signed.signed_request, url=signed.url)
