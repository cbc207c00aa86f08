"""
ExportDesk Backend: Freight and USD Rate Service Tests
======================================================

What we test:
    ✅ Day bounds are [00:00:00.000, 23:59:59.999] local time, in UTC
    ✅ "Latest" means newest updated_at
    ✅ Date lookups match only rates dated within the calendar day
    ✅ Airport codes are upper-cased on write and on lookup
    ✅ Rates must be present and > 0
"""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.schemas.common import validate_payload
from app.schemas.freight_rate import FreightRateInput
from app.schemas.usd_rate import UsdRateInput
from app.services.date_range import day_bounds, to_utc
from app.services.freight_rate_service import FreightRateService
from app.services.usd_rate_service import UsdRateService


def freight_input(**overrides) -> FreightRateInput:
    data = {
        "country": "Japan",
        "airport_code": "nrt",
        "airport_name": "Narita International",
        "rate_45kg": 4.1,
        "rate_100kg": 3.8,
        "rate_300kg": 3.5,
        "rate_500kg": 3.2,
    }
    data.update(overrides)
    return validate_payload(FreightRateInput, data)


def local_noon(day: date) -> datetime:
    """Naive local time, the way a browser date picker sends it."""
    return datetime.combine(day, time(12, 0))


class TestDayBounds:

    def test_bounds_span_the_local_day(self):
        start, end = day_bounds(date(2024, 1, 15))
        assert start.tzinfo == timezone.utc
        assert end - start == timedelta(hours=23, minutes=59, seconds=59, milliseconds=999)
        assert start.astimezone().date() == date(2024, 1, 15)
        assert start.astimezone().time() == time(0, 0)

    def test_to_utc_treats_naive_as_local(self):
        naive = datetime(2024, 1, 15, 12, 0)
        assert to_utc(naive) == naive.astimezone(timezone.utc)

    def test_to_utc_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        assert to_utc(None) >= before


class TestFreightRateInput:

    def test_strings_trimmed_and_code_upper_cased(self):
        data = freight_input(country="  Japan ", airport_code=" kix ")
        assert data.country == "Japan"
        assert data.airport_code == "KIX"

    @pytest.mark.parametrize("field", ["rate_45kg", "rate_100kg", "rate_300kg", "rate_500kg"])
    def test_rates_must_be_positive(self, field):
        with pytest.raises(ValidationError, match=field):
            freight_input(**{field: 0})

    def test_required_fields(self):
        with pytest.raises(ValidationError, match="airport_name"):
            validate_payload(
                FreightRateInput,
                {"country": "Japan", "airport_code": "NRT", "rate_45kg": 1,
                 "rate_100kg": 1, "rate_300kg": 1, "rate_500kg": 1},
            )


class TestFreightRateService:

    def setup_method(self):
        self.service = FreightRateService()

    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, db_session):
        created = await self.service.create_rate(db_session, freight_input())
        assert created.airport_code == "NRT"

        fetched = await self.service.get_rate(db_session, created.id)
        assert fetched.rate_45kg == 4.1

        updated = await self.service.update_rate(db_session, created.id, freight_input(rate_45kg=5.0))
        assert updated.rate_45kg == 5.0

        await self.service.delete_rate(db_session, created.id)
        with pytest.raises(NotFoundError):
            await self.service.get_rate(db_session, created.id)

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_rate(db_session, 999, freight_input())

    @pytest.mark.asyncio
    async def test_list_newest_first_with_limit(self, db_session):
        for code in ("NRT", "KIX", "HND"):
            await self.service.create_rate(db_session, freight_input(airport_code=code))

        rates = await self.service.list_rates(db_session, limit=2)
        assert [r.airport_code for r in rates] == ["HND", "KIX"]

    @pytest.mark.asyncio
    async def test_latest_for_country_and_airport(self, db_session):
        await self.service.create_rate(db_session, freight_input(airport_code="NRT", rate_45kg=4.0))
        await self.service.create_rate(db_session, freight_input(airport_code="KIX", rate_45kg=4.5))
        await self.service.create_rate(db_session, freight_input(airport_code="NRT", rate_45kg=4.2))
        await self.service.create_rate(db_session, freight_input(country="Korea", airport_code="ICN"))

        latest = await self.service.latest_for_country(db_session, "Japan")
        assert latest.rate_45kg == 4.2

        nrt = await self.service.latest_for_airport(db_session, "Japan", "nrt")
        assert nrt.rate_45kg == 4.2
        kix = await self.service.latest_for_airport(db_session, "Japan", "KIX")
        assert kix.rate_45kg == 4.5

        with pytest.raises(NotFoundError, match="country and airport"):
            await self.service.latest_for_airport(db_session, "Japan", "ICN")
        with pytest.raises(NotFoundError, match="this country"):
            await self.service.latest_for_country(db_session, "Peru")

    @pytest.mark.asyncio
    async def test_update_moves_rate_to_latest(self, db_session):
        older = await self.service.create_rate(db_session, freight_input(rate_45kg=4.0))
        await self.service.create_rate(db_session, freight_input(rate_45kg=4.4))

        await self.service.update_rate(db_session, older.id, freight_input(rate_45kg=3.9))

        latest = await self.service.latest_for_country(db_session, "Japan")
        assert latest.id == older.id

    @pytest.mark.asyncio
    async def test_list_for_country(self, db_session):
        await self.service.create_rate(db_session, freight_input())
        await self.service.create_rate(db_session, freight_input(country="Korea", airport_code="ICN"))

        rates = await self.service.list_for_country(db_session, "Korea")
        assert [r.airport_code for r in rates] == ["ICN"]

    @pytest.mark.asyncio
    async def test_rate_for_date_matches_calendar_day(self, db_session):
        day = date(2024, 1, 15)
        await self.service.create_rate(
            db_session, freight_input(date=local_noon(day - timedelta(days=1)), rate_45kg=1.0)
        )
        on_day = await self.service.create_rate(
            db_session, freight_input(date=local_noon(day), rate_45kg=2.0)
        )
        await self.service.create_rate(
            db_session, freight_input(date=local_noon(day + timedelta(days=1)), rate_45kg=3.0)
        )

        found = await self.service.rate_for_date(db_session, day, "Japan")
        assert found.id == on_day.id

        by_airport = await self.service.rate_for_date(db_session, day, "Japan", "nrt")
        assert by_airport.id == on_day.id

    @pytest.mark.asyncio
    async def test_rate_for_date_includes_day_edges(self, db_session):
        day = date(2024, 3, 1)
        first = await self.service.create_rate(
            db_session, freight_input(date=datetime.combine(day, time(0, 0)))
        )
        found = await self.service.rate_for_date(db_session, day, "Japan")
        assert found.id == first.id

        await self.service.delete_rate(db_session, first.id)
        last = await self.service.create_rate(
            db_session, freight_input(date=datetime.combine(day, time(23, 59, 59, 999000)))
        )
        found = await self.service.rate_for_date(db_session, day, "Japan")
        assert found.id == last.id

    @pytest.mark.asyncio
    async def test_rate_for_date_not_found(self, db_session):
        await self.service.create_rate(db_session, freight_input(date=local_noon(date(2024, 1, 15))))

        with pytest.raises(NotFoundError, match="date and country"):
            await self.service.rate_for_date(db_session, date(2024, 1, 16), "Japan")
        with pytest.raises(NotFoundError, match="date, country, and airport"):
            await self.service.rate_for_date(db_session, date(2024, 1, 15), "Japan", "KIX")


class TestUsdRateService:

    def setup_method(self):
        self.service = UsdRateService()

    def test_rate_must_be_positive(self):
        with pytest.raises(ValidationError, match="rate"):
            validate_payload(UsdRateInput, {"rate": 0})
        with pytest.raises(ValidationError, match="rate"):
            validate_payload(UsdRateInput, {})

    @pytest.mark.asyncio
    async def test_current_when_empty_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError, match="No USD rate found"):
            await self.service.current(db_session)

    @pytest.mark.asyncio
    async def test_current_is_newest_entry(self, db_session):
        await self.service.create_rate(db_session, UsdRateInput(rate=35.1))
        await self.service.create_rate(db_session, UsdRateInput(rate=35.4))

        current = await self.service.current(db_session)
        assert current.rate == 35.4

    @pytest.mark.asyncio
    async def test_history_newest_first_with_limit(self, db_session):
        for value in (34.0, 34.5, 35.0):
            await self.service.create_rate(db_session, UsdRateInput(rate=value))

        history = await self.service.history(db_session, limit=2)
        assert [r.rate for r in history] == [35.0, 34.5]

    @pytest.mark.asyncio
    async def test_rate_for_date(self, db_session):
        day = date(2024, 2, 10)
        entry = await self.service.create_rate(db_session, UsdRateInput(rate=36.0, date=local_noon(day)))

        found = await self.service.rate_for_date(db_session, day)
        assert found.id == entry.id
        with pytest.raises(NotFoundError, match="this date"):
            await self.service.rate_for_date(db_session, day + timedelta(days=1))

    @pytest.mark.asyncio
    async def test_update_and_delete(self, db_session):
        entry = await self.service.create_rate(db_session, UsdRateInput(rate=36.0))

        updated = await self.service.update_rate(db_session, entry.id, UsdRateInput(rate=36.5))
        assert updated.rate == 36.5

        await self.service.delete_rate(db_session, entry.id)
        with pytest.raises(NotFoundError):
            await self.service.delete_rate(db_session, entry.id)
