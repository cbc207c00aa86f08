"""
ExportDesk Backend: Freight Rate SQLAlchemy Model
=================================================

What:  ORM model for the `freight_rates` table: air freight prices per
       destination country and airport, in four gross-weight tiers.

Table Design:
    - airport_code is stored upper-cased (IATA style)
    - date: the moment the rate applies to (lookups match a whole calendar day)
    - updated_at: set on every write; "latest" means newest updated_at
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FreightRate(Base):
    """One quoted freight rate for a country/airport pair."""

    __tablename__ = "freight_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    country: Mapped[str] = mapped_column(String(100), nullable=False)
    airport_code: Mapped[str] = mapped_column(String(10), nullable=False)
    airport_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Price per kg for each gross-weight tier, always > 0
    rate_45kg: Mapped[float] = mapped_column(Float, nullable=False)
    rate_100kg: Mapped[float] = mapped_column(Float, nullable=False)
    rate_300kg: Mapped[float] = mapped_column(Float, nullable=False)
    rate_500kg: Mapped[float] = mapped_column(Float, nullable=False)

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_freight_rates_country_airport", "country", "airport_code"),
        Index("idx_freight_rates_updated_at", updated_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<FreightRate(id={self.id}, country='{self.country}', "
            f"airport_code='{self.airport_code}')>"
        )
