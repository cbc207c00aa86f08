"""
ExportDesk Backend: Customer Price List SQLAlchemy Model
========================================================

What:  ORM model for the `exportcustomer_product` table: one row per product
       on a customer's price list, with the full FOB/CNF cost breakdown.

Column names match the historical schema, including the camel-cased
`forwardHandling_cost`, so existing clients keep working.
"""

from typing import Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class CustomerProductPrice(Base):
    """A product priced for one export customer."""

    __tablename__ = "exportcustomer_product"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    cus_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("exportcustomers.cus_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Loose reference: the price row outlives catalogue edits
    product_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    common_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    size_range: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # ── Cost Breakdown ────────────────────────────────────────────────────
    purchasing_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    exfactoryprice: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    margin: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    margin_percentage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    export_doc: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    transport_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    loading_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    airway_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    forwardHandling_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    multiplier: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    divisor: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    freight_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gross_weight_tier: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    fob_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    cnf: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    __table_args__ = (
        Index("idx_exportcustomer_product_cus_id", "cus_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<CustomerProductPrice(id={self.id}, cus_id={self.cus_id}, "
            f"common_name='{self.common_name}')>"
        )
