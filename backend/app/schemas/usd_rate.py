"""
ExportDesk Backend: USD Rate Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UsdRateInput(BaseModel):
    """Body of POST /api/usd-rate and PUT /api/usd-rate/{id}."""
    model_config = {"allow_inf_nan": False}

    rate: float = Field(gt=0, description="Local currency per 1 USD")
    date: Optional[datetime] = Field(default=None, description="When the rate applies (ISO 8601)")


class UsdRateResponse(BaseModel):
    id: int
    rate: float
    date: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UsdRateSummary(BaseModel):
    """GET /api/usd-rate: the current rate without its row id."""
    rate: float
    date: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UsdRateWriteResponse(UsdRateSummary):
    message: str = "USD rate updated successfully"
