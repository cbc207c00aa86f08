"""
ExportDesk Backend: Freight Rate Route Handlers
===============================================

What:  /api/freight-rates: listing, country/airport/date lookups and writes.
Who:   Called by the quotation screens, which need the rate that applied on a
       shipment date or the latest one for a destination.

Date path segments are calendar dates (YYYY-MM-DD); a rate matches when its
`date` falls within that day in server local time.
"""

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.freight_rate import (
    FreightRateInput,
    FreightRateResponse,
    FreightRateWriteResponse,
)
from app.services.freight_rate_service import freight_rate_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/freight-rates", tags=["Freight Rates"])

NOT_FOUND = {404: {"description": "No matching rate", "model": ErrorResponse}}
INVALID = {400: {"description": "Invalid input", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[FreightRateResponse],
    summary="List freight rates, newest first",
)
async def list_rates(
    limit: int = Query(
        default=settings.default_list_limit,
        ge=1,
        le=settings.max_list_limit,
        description="Maximum number of rows",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[FreightRateResponse]:
    return await freight_rate_service.list_rates(db, limit)


@router.get(
    "/country/{country}",
    response_model=List[FreightRateResponse],
    summary="All rates for a country, newest first",
)
async def list_for_country(
    country: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[FreightRateResponse]:
    return await freight_rate_service.list_for_country(db, country)


@router.get(
    "/country/{country}/latest",
    response_model=FreightRateResponse,
    responses=NOT_FOUND,
    summary="Latest rate for a country (any airport)",
)
async def latest_for_country(
    country: str,
    db: AsyncSession = Depends(get_db_session),
) -> FreightRateResponse:
    return await freight_rate_service.latest_for_country(db, country)


@router.get(
    "/country/{country}/airport/{airport_code}/latest",
    response_model=FreightRateResponse,
    responses=NOT_FOUND,
    summary="Latest rate for a country and airport",
)
async def latest_for_airport(
    country: str,
    airport_code: str,
    db: AsyncSession = Depends(get_db_session),
) -> FreightRateResponse:
    return await freight_rate_service.latest_for_airport(db, country, airport_code)


@router.get(
    "/date/{day}/country/{country}",
    response_model=FreightRateResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Rate for a date and country (any airport)",
)
async def rate_for_date(
    day: date,
    country: str,
    db: AsyncSession = Depends(get_db_session),
) -> FreightRateResponse:
    return await freight_rate_service.rate_for_date(db, day, country)


@router.get(
    "/date/{day}/country/{country}/airport/{airport_code}",
    response_model=FreightRateResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Rate for a date, country and airport",
)
async def rate_for_date_and_airport(
    day: date,
    country: str,
    airport_code: str,
    db: AsyncSession = Depends(get_db_session),
) -> FreightRateResponse:
    return await freight_rate_service.rate_for_date(db, day, country, airport_code)


@router.get(
    "/{rate_id}",
    response_model=FreightRateResponse,
    responses=NOT_FOUND,
    summary="Get a freight rate",
)
async def get_rate(
    rate_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> FreightRateResponse:
    return await freight_rate_service.get_rate(db, rate_id)


@router.post(
    "",
    status_code=201,
    response_model=FreightRateWriteResponse,
    responses=INVALID,
    summary="Create a freight rate",
)
async def create_rate(
    body: FreightRateInput,
    db: AsyncSession = Depends(get_db_session),
) -> FreightRateWriteResponse:
    rate = await freight_rate_service.create_rate(db, body)
    return FreightRateWriteResponse(
        message="Freight rate added successfully",
        data=FreightRateResponse.model_validate(rate),
    )


@router.put(
    "/{rate_id}",
    response_model=FreightRateWriteResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Update a freight rate",
)
async def update_rate(
    rate_id: int,
    body: FreightRateInput,
    db: AsyncSession = Depends(get_db_session),
) -> FreightRateWriteResponse:
    rate = await freight_rate_service.update_rate(db, rate_id, body)
    return FreightRateWriteResponse(
        message="Freight rate updated successfully",
        data=FreightRateResponse.model_validate(rate),
    )


@router.delete(
    "/{rate_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Delete a freight rate",
)
async def delete_rate(
    rate_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await freight_rate_service.delete_rate(db, rate_id)
    return MessageResponse(message="Freight rate deleted successfully")
