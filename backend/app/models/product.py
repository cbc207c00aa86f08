"""
ExportDesk Backend: Product SQLAlchemy Model
============================================

What:  ORM model for the `products` table.
How:   Variants are NOT rows of their own. They live as one JSON array on the
       product row (JSONB on PostgreSQL) and are rewritten as a whole on
       every change.

Variant entries:
    {"id": "<str>", "size": "10kg", "unit": "box", "purchasing_price": 12.5}

    Older rows may hold numeric ids; those are matched by their string form.

Concurrency:
    `version` is the mapper's version_id_col. ORM updates and deletes check it
    automatically, and the variant store checks and bumps it by hand on its
    conditional UPDATE. A write against a stale version changes no rows.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
VariantArray = JSON().with_variant(JSONB(), "postgresql")


class Product(Base):
    """
    A product in the price catalogue.

    Query Patterns:
        - List catalogue: SELECT ... ORDER BY common_name
        - Variant read:   SELECT variants, version WHERE id = :id
        - Variant write:  UPDATE ... SET variants = :v, version = version + 1
                          WHERE id = :id AND version = :seen
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    common_name: Mapped[str] = mapped_column(String(255), nullable=False)
    scientific_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Public URL returned by the object store
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    variants: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(
        VariantArray,
        nullable=True,
        default=list,
        comment="Ordered array of size/price variants",
    )

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=text("1"),
        comment="Optimistic concurrency counter, bumped on every write",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_products_common_name", "common_name"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, common_name='{self.common_name}', version={self.version})>"
