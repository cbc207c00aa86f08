"""
ExportDesk Backend: USD Rate Route Handlers

/api/usd-rate: the current exchange rate, its history and per-day lookups.
Creating a rate makes it the current one.
"""

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.models.usd_rate import UsdRate
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.usd_rate import (
    UsdRateInput,
    UsdRateResponse,
    UsdRateSummary,
    UsdRateWriteResponse,
)
from app.services.usd_rate_service import usd_rate_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/usd-rate", tags=["USD Rate"])

NOT_FOUND = {404: {"description": "No matching rate", "model": ErrorResponse}}
INVALID = {400: {"description": "Invalid input", "model": ErrorResponse}}


def _write_response(rate: UsdRate) -> UsdRateWriteResponse:
    return UsdRateWriteResponse(rate=rate.rate, date=rate.date, updated_at=rate.updated_at)


@router.get(
    "",
    response_model=UsdRateSummary,
    responses=NOT_FOUND,
    summary="Current USD rate",
)
async def current_rate(db: AsyncSession = Depends(get_db_session)) -> UsdRateSummary:
    rate = await usd_rate_service.current(db)
    return UsdRateSummary.model_validate(rate)


@router.get(
    "/history",
    response_model=List[UsdRateResponse],
    summary="Rate history, newest first",
)
async def rate_history(
    limit: int = Query(
        default=settings.default_list_limit,
        ge=1,
        le=settings.max_list_limit,
        description="Maximum number of entries",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[UsdRateResponse]:
    return await usd_rate_service.history(db, limit)


@router.get(
    "/date/{day}",
    response_model=UsdRateResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Rate that applied on a calendar day",
)
async def rate_for_date(
    day: date,
    db: AsyncSession = Depends(get_db_session),
) -> UsdRateResponse:
    return await usd_rate_service.rate_for_date(db, day)


@router.get(
    "/{rate_id}",
    response_model=UsdRateResponse,
    responses=NOT_FOUND,
    summary="Get a rate entry",
)
async def get_rate(
    rate_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UsdRateResponse:
    return await usd_rate_service.get_rate(db, rate_id)


@router.post(
    "",
    status_code=201,
    response_model=UsdRateWriteResponse,
    responses=INVALID,
    summary="Record a new USD rate",
)
async def create_rate(
    body: UsdRateInput,
    db: AsyncSession = Depends(get_db_session),
) -> UsdRateWriteResponse:
    rate = await usd_rate_service.create_rate(db, body)
    return _write_response(rate)


@router.put(
    "/{rate_id}",
    response_model=UsdRateWriteResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Correct an existing rate entry",
)
async def update_rate(
    rate_id: int,
    body: UsdRateInput,
    db: AsyncSession = Depends(get_db_session),
) -> UsdRateWriteResponse:
    rate = await usd_rate_service.update_rate(db, rate_id, body)
    return _write_response(rate)


@router.delete(
    "/{rate_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Delete a rate entry",
)
async def delete_rate(
    rate_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await usd_rate_service.delete_rate(db, rate_id)
    return MessageResponse(message="Rate entry deleted successfully")
