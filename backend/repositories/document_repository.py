"""Document repository: read a collection, get, put, push, put a single field."""
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from models.document import Document


def list_collection(session: Session, collection: str) -> dict[str, Any]:
    """Return {key: value} for every document in a collection (empty dict when none)."""
    result = session.execute(
        select(Document).where(Document.collection == collection).order_by(Document.key)
    )
    return {doc.key: doc.value for doc in result.scalars().all()}


def get_document(session: Session, collection: str, key: str) -> Optional[Document]:
    """Return a document by collection and key or None."""
    return session.execute(
        select(Document).where(Document.collection == collection, Document.key == key)
    ).scalar_one_or_none()


def put_document(session: Session, collection: str, key: str, value: Any) -> Document:
    """Create or fully replace the document at collection/key, commit, and return it."""
    doc = get_document(session, collection, key)
    if doc is None:
        doc = Document(collection=collection, key=key, value=value)
        session.add(doc)
    else:
        doc.value = value
        flag_modified(doc, "value")
    session.commit()
    session.refresh(doc)
    return doc


def push_document(session: Session, collection: str, value: Any) -> str:
    """Store value under a newly generated key and return the key."""
    key = uuid.uuid4().hex
    put_document(session, collection, key, value)
    return key


def put_field(session: Session, collection: str, key: str, field: str, value: Any) -> Optional[Document]:
    """Replace one field of a mapping document. Returns None if the document does not exist."""
    doc = get_document(session, collection, key)
    if doc is None:
        return None
    current = dict(doc.value) if isinstance(doc.value, dict) else {}
    current[field] = value
    doc.value = current
    flag_modified(doc, "value")
    session.commit()
    session.refresh(doc)
    return doc
