"""Record store clients: the realtime database REST API and the local SQL document table."""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from repositories.document_repository import (
    get_document,
    list_collection,
    push_document,
    put_document,
    put_field,
)

LOG = logging.getLogger(__name__)

COORDINATES = "latLngs"
DETAILS = "slipwayDetails"


class RecordStoreError(RuntimeError):
    """A read or write against the record store failed."""


class RecordStore(Protocol):
    """Thin read/write API over a key-value document store."""

    async def read_collection(self, collection: str) -> Any: ...

    async def read(self, collection: str, key: str) -> Any: ...

    async def write(self, collection: str, key: str, value: Any) -> None: ...

    async def write_field(self, collection: str, key: str, field: str, value: Any) -> None: ...

    async def push(self, collection: str, value: Any) -> str: ...


class FirebaseRecordStore:
    """Realtime database over its REST API: GET/PUT <base>/<path>.json, POST to push."""

    def __init__(self, base_url: str, http: httpx.AsyncClient, auth_token: Optional[str] = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http
        self._auth_token = auth_token

    def _url(self, *parts: str) -> str:
        return f"{self._base_url}/{'/'.join(parts)}.json"

    def _params(self) -> dict[str, str]:
        return {"auth": self._auth_token} if self._auth_token else {}

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, url, params=self._params(), **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RecordStoreError(f"{method} {url} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RecordStoreError(f"{method} {url} failed: {e}") from e
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RecordStoreError(f"{method} {url} returned a body that is not JSON") from e

    async def read_collection(self, collection: str) -> Any:
        return await self._request("GET", self._url(collection))

    async def read(self, collection: str, key: str) -> Any:
        return await self._request("GET", self._url(collection, key))

    async def write(self, collection: str, key: str, value: Any) -> None:
        await self._request("PUT", self._url(collection, key), json=value)

    async def write_field(self, collection: str, key: str, field: str, value: Any) -> None:
        await self._request("PUT", self._url(collection, key, field), json=value)

    async def push(self, collection: str, value: Any) -> str:
        body = await self._request("POST", self._url(collection), json=value)
        if not isinstance(body, dict) or not body.get("name"):
            raise RecordStoreError(f"push to {collection} returned no key")
        return str(body["name"])


class SqlRecordStore:
    """Document store backed by the local database (development and tests).

    Repository calls run inline and block the event loop. Gathered reads share one
    Session, which must not be used from two worker threads at once.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _run(self, op: str, fn, *args: Any) -> Any:
        try:
            return fn(self._session, *args)
        except SQLAlchemyError as e:
            self._session.rollback()
            LOG.exception("record store %s failed", op)
            raise RecordStoreError(f"{op} failed: {e}") from e

    async def read_collection(self, collection: str) -> Any:
        return self._run("read_collection", list_collection, collection) or None

    async def read(self, collection: str, key: str) -> Any:
        doc = self._run("read", get_document, collection, key)
        return doc.value if doc is not None else None

    async def write(self, collection: str, key: str, value: Any) -> None:
        self._run("write", put_document, collection, key, value)

    async def write_field(self, collection: str, key: str, field: str, value: Any) -> None:
        if self._run("write_field", put_field, collection, key, field, value) is None:
            raise RecordStoreError(f"{collection}/{key} does not exist")

    async def push(self, collection: str, value: Any) -> str:
        return self._run("push", push_document, collection, value)
