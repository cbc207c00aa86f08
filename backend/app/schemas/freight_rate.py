"""
ExportDesk Backend: Freight Rate Schemas
========================================

What:  Request and response models for /api/freight-rates.

Validation rules (shared by create and update):
    - country, airport_code, airport_name: required, trimmed, non-empty
    - airport_code: upper-cased
    - rate_45kg / rate_100kg / rate_300kg / rate_500kg: required, > 0
    - date: optional; defaults to "now" when omitted
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class FreightRateInput(BaseModel):
    """Body of POST /api/freight-rates and PUT /api/freight-rates/{id}."""

    model_config = {"str_strip_whitespace": True, "allow_inf_nan": False}

    country: str = Field(min_length=1, max_length=100)
    airport_code: str = Field(min_length=1, max_length=10)
    airport_name: str = Field(min_length=1, max_length=255)
    rate_45kg: float = Field(gt=0, description="Rate per kg for the 45kg tier")
    rate_100kg: float = Field(gt=0, description="Rate per kg for the 100kg tier")
    rate_300kg: float = Field(gt=0, description="Rate per kg for the 300kg tier")
    rate_500kg: float = Field(gt=0, description="Rate per kg for the 500kg tier")
    date: Optional[datetime] = Field(default=None, description="When the rate applies (ISO 8601)")

    @field_validator("airport_code")
    @classmethod
    def upper_airport_code(cls, v: str) -> str:
        return v.upper()


class FreightRateResponse(BaseModel):
    id: int
    country: str
    airport_code: str
    airport_name: str
    rate_45kg: float
    rate_100kg: float
    rate_300kg: float
    rate_500kg: float
    date: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FreightRateWriteResponse(BaseModel):
    """Returned by create (201) and update (200)."""
    message: str
    data: FreightRateResponse
