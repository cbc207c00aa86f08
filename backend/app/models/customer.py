"""
ExportDesk Backend: Export Customer SQLAlchemy Model
====================================================

What:  ORM model for the `exportcustomers` table.
How:   The primary key keeps its historical column name `cus_id`; the price
       list table refers to customers by it.
"""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ExportCustomer(Base):
    """An overseas buyer, with the airport their shipments fly to."""

    __tablename__ = "exportcustomers"

    cus_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cus_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    airport: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ExportCustomer(cus_id={self.cus_id}, cus_name='{self.cus_name}')>"
