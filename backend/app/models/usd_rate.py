"""
ExportDesk Backend: USD Rate SQLAlchemy Model

The `usd_rates` table keeps every exchange rate entry ever recorded. The
current rate is simply the row with the newest updated_at.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UsdRate(Base):
    __tablename__ = "usd_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rate: Mapped[float] = mapped_column(Float, nullable=False)
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
        Index("idx_usd_rates_updated_at", updated_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<UsdRate(id={self.id}, rate={self.rate})>"
