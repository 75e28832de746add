"""Client side of the photo upload: validate, sign, PUT straight to storage, then record the image id."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional

import httpx

from slipway_core.editor import EntityEditor
from slipway_core.entity import EntityNotFound
from slipway_core.images import (
    PHOTOS_BASE_URL,
    generate_image_id,
    image_display_url,
    object_key,
    validate_image_file,
)
from slipway_core.record_store import RecordStoreError
from slipway_core.signing import PUBLIC_READ, SignedUpload

LOG = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ProgressFn = Callable[[int], None]


class UploadError(Exception):
    """Base for upload failures. str(e) is the user-facing message."""


class UploadValidationError(UploadError):
    """File rejected before any network call."""


class UploadConfigurationError(UploadError):
    """Signing endpoint reports missing storage configuration."""


class UploadTransferError(UploadError):
    """Network or status failure while signing or transferring. The user may retry the whole upload."""


class UploadPersistError(UploadError):
    """The object is in storage but the slipway record could not be updated with its id."""


@dataclass(frozen=True)
class UploadResult:
    image_id: str
    url: str
    display_url: str
    imgs: list[str]


def progress_percent(sent: int, total: int) -> int:
    if total <= 0:
        return 100
    return round(sent / total * 100)


async def _stream(content: bytes, on_progress: Optional[ProgressFn]) -> AsyncIterator[bytes]:
    total = len(content)
    sent = 0
    for start in range(0, total, CHUNK_SIZE):
        chunk = content[start:start + CHUNK_SIZE]
        yield chunk
        sent += len(chunk)
        if on_progress is not None:
            on_progress(progress_percent(sent, total))


class UploadHandshake:
    """Two-phase upload: GET <signing_base>/sign_s3, then PUT the bytes to the signed URL."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        signing_base_url: str,
        photos_base_url: str = PHOTOS_BASE_URL,
    ) -> None:
        self._http = http
        self._signing_base_url = signing_base_url.rstrip("/")
        self._photos_base_url = photos_base_url

    async def sign(self, key: str, content_type: str) -> SignedUpload:
        try:
            response = await self._http.get(
                f"{self._signing_base_url}/sign_s3",
                params={"file_name": key, "file_type": content_type},
            )
        except httpx.HTTPError as e:
            raise UploadTransferError("Network error while requesting signed URL") from e
        if response.status_code == 500:
            LOG.error("Signing endpoint misconfigured: %s", response.text)
            raise UploadConfigurationError("Could not get signed URL from server")
        if response.status_code != 200:
            raise UploadError(_error_text(response) or "Could not get signed URL from server")
        try:
            body = response.json()
            return SignedUpload(signed_request=body["signed_request"], url=body["url"])
        except (ValueError, KeyError, TypeError) as e:
            raise UploadError("Failed to parse server response") from e

    async def transfer(
        self,
        signed: SignedUpload,
        content: bytes,
        content_type: str,
        on_progress: Optional[ProgressFn] = None,
    ) -> None:
        headers = {
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
            "x-amz-acl": PUBLIC_READ,
        }
        try:
            response = await self._http.put(
                signed.signed_request,
                content=_stream(content, on_progress),
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise UploadTransferError("Could not upload file to storage") from e
        if not response.is_success:
            raise UploadTransferError(f"Upload failed with status: {response.status_code}")

    async def upload_photo(
        self,
        editor: EntityEditor,
        entity_id: str,
        content: bytes,
        content_type: str,
        on_progress: Optional[ProgressFn] = None,
    ) -> UploadResult:
        """Run the whole hand-off. The image id is recorded on the slipway only after the PUT succeeds."""
        ok, error = validate_image_file(content_type, len(content))
        if not ok:
            raise UploadValidationError(error)
        image_id = generate_image_id(entity_id)
        signed = await self.sign(object_key(image_id), content_type)
        await self.transfer(signed, content, content_type, on_progress)
        try:
            imgs = await editor.append_image(entity_id, image_id)
        except (RecordStoreError, EntityNotFound) as e:
            LOG.error("Uploaded %s but could not record it on slipway %s: %s", image_id, entity_id, e)
            raise UploadPersistError("Image uploaded but could not be saved to the slipway") from e
        LOG.info("Uploaded %s for slipway %s", image_id, entity_id)
        return UploadResult(
            image_id=image_id,
            url=signed.url,
            display_url=image_display_url(image_id, self._photos_base_url),
            imgs=imgs,
        )


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    return str(body.get("error", "")) if isinstance(body, dict) else ""
