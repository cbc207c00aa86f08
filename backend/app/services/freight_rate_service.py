"""
ExportDesk Backend: Freight Rate Service
========================================

What:  Listing, lookups and writes for air freight rates.
Who:   Called by the /api/freight-rates route handlers.

Ordering:
    "Latest" always means newest `updated_at` (ties broken by id), so a rate
    re-saved today wins over one created yesterday even if their `date`
    values are the other way round.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_errors
from app.exceptions import NotFoundError
from app.models.freight_rate import FreightRate
from app.schemas.freight_rate import FreightRateInput
from app.services.date_range import day_bounds, to_utc, utcnow

logger = logging.getLogger(__name__)


def _newest_first(query: Select) -> Select:
    return query.order_by(FreightRate.updated_at.desc(), FreightRate.id.desc())


class FreightRateService:
    """Business logic for the freight_rates table."""

    async def list_rates(self, db: AsyncSession, limit: int) -> List[FreightRate]:
        async with translate_errors("load freight rates"):
            result = await db.execute(_newest_first(select(FreightRate)).limit(limit))
            return list(result.scalars().all())

    async def get_rate(self, db: AsyncSession, rate_id: int) -> FreightRate:
        async with translate_errors("load the freight rate"):
            rate = await db.get(FreightRate, rate_id)
        if rate is None:
            raise NotFoundError(resource="freight rate", resource_id=str(rate_id))
        return rate

    async def list_for_country(self, db: AsyncSession, country: str) -> List[FreightRate]:
        async with translate_errors("load freight rates"):
            result = await db.execute(
                _newest_first(select(FreightRate).where(FreightRate.country == country))
            )
            return list(result.scalars().all())

    async def _first(self, db: AsyncSession, query: Select, not_found: str) -> FreightRate:
        async with translate_errors("load the freight rate"):
            result = await db.execute(_newest_first(query).limit(1))
            rate = result.scalars().first()
        if rate is None:
            raise NotFoundError(resource="freight rate", message=not_found)
        return rate

    async def latest_for_country(self, db: AsyncSession, country: str) -> FreightRate:
        return await self._first(
            db,
            select(FreightRate).where(FreightRate.country == country),
            "No rate found for this country",
        )

    async def latest_for_airport(
        self, db: AsyncSession, country: str, airport_code: str
    ) -> FreightRate:
        return await self._first(
            db,
            select(FreightRate).where(
                FreightRate.country == country,
                FreightRate.airport_code == airport_code.upper(),
            ),
            "No rate found for this country and airport",
        )

    async def rate_for_date(
        self,
        db: AsyncSession,
        day: date,
        country: str,
        airport_code: Optional[str] = None,
    ) -> FreightRate:
        """
        Most recently updated rate whose `date` falls on the given calendar day.

        Without `airport_code` any airport of the country matches.
        """
        start, end = day_bounds(day)
        query = select(FreightRate).where(
            FreightRate.country == country,
            FreightRate.date >= start,
            FreightRate.date <= end,
        )
        not_found = "No rate found for this date and country"
        if airport_code is not None:
            query = query.where(FreightRate.airport_code == airport_code.upper())
            not_found = "No rate found for this date, country, and airport"
        return await self._first(db, query, not_found)

    async def create_rate(self, db: AsyncSession, data: FreightRateInput) -> FreightRate:
        async with translate_errors("create the freight rate"):
            rate = FreightRate(
                **data.model_dump(exclude={"date"}),
                date=to_utc(data.date),
                updated_at=utcnow(),
            )
            db.add(rate)
            await db.flush()

        logger.info(
            "Freight rate created: %s (%s/%s)", rate.id, rate.country, rate.airport_code
        )
        return rate

    async def update_rate(
        self, db: AsyncSession, rate_id: int, data: FreightRateInput
    ) -> FreightRate:
        rate = await self.get_rate(db, rate_id)
        async with translate_errors("update the freight rate"):
            for field, value in data.model_dump(exclude={"date"}).items():
                setattr(rate, field, value)
            rate.date = to_utc(data.date)
            rate.updated_at = utcnow()
            await db.flush()

        logger.info("Freight rate updated: %s", rate.id)
        return rate

    async def delete_rate(self, db: AsyncSession, rate_id: int) -> None:
        rate = await self.get_rate(db, rate_id)
        async with translate_errors("delete the freight rate"):
            await db.delete(rate)
            await db.flush()
        logger.info("Freight rate deleted: %s", rate_id)


freight_rate_service = FreightRateService()
