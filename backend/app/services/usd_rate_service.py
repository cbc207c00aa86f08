"""
ExportDesk Backend: USD Rate Service

Every entry is kept; the current rate is the newest one by updated_at.
"""

import logging
from datetime import date
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_errors
from app.exceptions import NotFoundError
from app.models.usd_rate import UsdRate
from app.schemas.usd_rate import UsdRateInput
from app.services.date_range import day_bounds, to_utc, utcnow

logger = logging.getLogger(__name__)

NEWEST_FIRST = (UsdRate.updated_at.desc(), UsdRate.id.desc())


class UsdRateService:

    async def current(self, db: AsyncSession) -> UsdRate:
        async with translate_errors("load the USD rate"):
            result = await db.execute(select(UsdRate).order_by(*NEWEST_FIRST).limit(1))
            rate = result.scalars().first()
        if rate is None:
            raise NotFoundError(resource="USD rate", message="No USD rate found")
        return rate

    async def history(self, db: AsyncSession, limit: int) -> List[UsdRate]:
        async with translate_errors("load the USD rate history"):
            result = await db.execute(select(UsdRate).order_by(*NEWEST_FIRST).limit(limit))
            return list(result.scalars().all())

    async def rate_for_date(self, db: AsyncSession, day: date) -> UsdRate:
        start, end = day_bounds(day)
        async with translate_errors("load the USD rate"):
            result = await db.execute(
                select(UsdRate)
                .where(UsdRate.date >= start, UsdRate.date <= end)
                .order_by(*NEWEST_FIRST)
                .limit(1)
            )
            rate = result.scalars().first()
        if rate is None:
            raise NotFoundError(resource="USD rate", message="No rate found for this date")
        return rate

    async def get_rate(self, db: AsyncSession, rate_id: int) -> UsdRate:
        async with translate_errors("load the USD rate"):
            rate = await db.get(UsdRate, rate_id)
        if rate is None:
            raise NotFoundError(resource="USD rate", resource_id=str(rate_id))
        return rate

    async def create_rate(self, db: AsyncSession, data: UsdRateInput) -> UsdRate:
        async with translate_errors("save the USD rate"):
            rate = UsdRate(rate=data.rate, date=to_utc(data.date), updated_at=utcnow())
            db.add(rate)
            await db.flush()
        logger.info("USD rate recorded: %s (rate=%s)", rate.id, rate.rate)
        return rate

    async def update_rate(self, db: AsyncSession, rate_id: int, data: UsdRateInput) -> UsdRate:
        rate = await self.get_rate(db, rate_id)
        async with translate_errors("update the USD rate"):
            rate.rate = data.rate
            rate.date = to_utc(data.date)
            rate.updated_at = utcnow()
            await db.flush()
        logger.info("USD rate updated: %s (rate=%s)", rate.id, rate.rate)
        return rate

    async def delete_rate(self, db: AsyncSession, rate_id: int) -> None:
        rate = await self.get_rate(db, rate_id)
        async with translate_errors("delete the USD rate"):
            await db.delete(rate)
            await db.flush()
        logger.info("USD rate deleted: %s", rate_id)


usd_rate_service = UsdRateService()
