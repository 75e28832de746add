"""Document model: one JSON value per (collection, key), mirroring the realtime database layout."""
import uuid

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from models import Base


class Document(Base):
    """Document table: id, collection ("latLngs" / "slipwayDetails"), key (slipway id), value."""

    __tablename__ = "document"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    collection: Mapped[str] = mapped_column(String(64), nullable=False)
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[dict | list | None] = mapped_column(JSON(), nullable=True)

    __table_args__ = (UniqueConstraint("collection", "key", name="uq_document_collection_key"),)
