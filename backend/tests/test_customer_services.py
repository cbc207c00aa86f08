"""
ExportDesk Backend: Customer and Price List Service Tests
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.schemas.common import validate_payload
from app.schemas.customer import CustomerForm
from app.schemas.customer_product import CustomerProductCreate, CustomerProductUpdate
from app.services.customer_product_service import CustomerProductService
from app.services.customer_service import CustomerService
from app.services.file_service import ImageUpload


def customer_form(**fields) -> CustomerForm:
    return validate_payload(CustomerForm, {"cus_name": "Sakura Trading", **fields})


class TestCustomerService:

    def setup_method(self):
        self.service = CustomerService()

    def test_name_required(self):
        with pytest.raises(ValidationError, match="cus_name"):
            validate_payload(CustomerForm, {"company_name": "Sakura KK"})

    @pytest.mark.asyncio
    async def test_create_list_get(self, db_session):
        first = await self.service.create_customer(db_session, customer_form(country="Japan"))
        second = await self.service.create_customer(db_session, customer_form(cus_name="Han River Foods"))

        listed = await self.service.list_customers(db_session)
        assert [c.cus_id for c in listed] == [first.cus_id, second.cus_id]

        fetched = await self.service.get_customer(db_session, first.cus_id)
        assert fetched.country == "Japan"
        assert fetched.image_url is None

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError, match="customer"):
            await self.service.get_customer(db_session, 404)

    @pytest.mark.asyncio
    async def test_update_keeps_unsent_fields_and_image(self, db_session):
        created = await self.service.create_customer(
            db_session,
            customer_form(phone="+81 3 1234 5678", airport="NRT"),
        )
        created.image_url = "/api/files/customer-images/old.png"

        updated = await self.service.update_customer(
            db_session, created.cus_id, customer_form(cus_name="Sakura Trading KK", airport="KIX")
        )

        assert updated.cus_name == "Sakura Trading KK"
        assert updated.airport == "KIX"
        assert updated.phone == "+81 3 1234 5678"
        assert updated.image_url == "/api/files/customer-images/old.png"

    @pytest.mark.asyncio
    async def test_upload_goes_to_customer_bucket(self, db_session, sample_image_bytes):
        with patch("app.services.customer_service.file_service") as mock_files:
            mock_files.upload = AsyncMock(return_value="/api/files/customer-images/1-abc.jpg")

            created = await self.service.create_customer(
                db_session,
                customer_form(),
                ImageUpload(filename="logo.jpg", content=sample_image_bytes),
            )

        assert created.image_url == "/api/files/customer-images/1-abc.jpg"
        assert mock_files.upload.await_args.args[0] == "customer-images"

    @pytest.mark.asyncio
    async def test_existing_image_url_kept_on_update(self, db_session):
        created = await self.service.create_customer(db_session, customer_form())

        updated = await self.service.update_customer(
            db_session,
            created.cus_id,
            customer_form(existing_image_url="https://cdn.example.com/logo.png"),
        )
        assert updated.image_url == "https://cdn.example.com/logo.png"

    @pytest.mark.asyncio
    async def test_delete_removes_price_list(self, db_session):
        customer = await self.service.create_customer(db_session, customer_form())
        prices = CustomerProductService()
        await prices.create_price(
            db_session, CustomerProductCreate(cus_id=customer.cus_id, common_name="Tilapia")
        )

        await self.service.delete_customer(db_session, customer.cus_id)

        with pytest.raises(NotFoundError):
            await self.service.get_customer(db_session, customer.cus_id)
        assert await prices.list_for_customer(db_session, customer.cus_id) == []


class TestCustomerProductService:

    def setup_method(self):
        self.service = CustomerProductService()

    async def _customer(self, db) -> int:
        customer = await CustomerService().create_customer(db, customer_form())
        return customer.cus_id

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError, match="unexpected_column"):
            validate_payload(CustomerProductCreate, {"cus_id": 1, "unexpected_column": 3})

    def test_cus_id_required_on_create(self):
        with pytest.raises(ValidationError, match="cus_id"):
            validate_payload(CustomerProductCreate, {"common_name": "Tilapia"})

    @pytest.mark.asyncio
    async def test_list_ordered_by_common_name(self, db_session):
        cus_id = await self._customer(db_session)
        for name in ("Shrimp", "Barramundi", "Mackerel"):
            await self.service.create_price(
                db_session, CustomerProductCreate(cus_id=cus_id, common_name=name)
            )

        rows = await self.service.list_for_customer(db_session, cus_id)
        assert [r.common_name for r in rows] == ["Barramundi", "Mackerel", "Shrimp"]

    @pytest.mark.asyncio
    async def test_create_for_missing_customer_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError, match="customer"):
            await self.service.create_price(db_session, CustomerProductCreate(cus_id=404))

    @pytest.mark.asyncio
    async def test_update_applies_only_sent_fields(self, db_session):
        cus_id = await self._customer(db_session)
        row = await self.service.create_price(
            db_session,
            CustomerProductCreate(
                cus_id=cus_id, common_name="Tilapia", fob_price=4.2, forwardHandling_cost=0.3
            ),
        )

        updated = await self.service.update_price(
            db_session, row.id, CustomerProductUpdate(fob_price=4.5)
        )

        assert updated.fob_price == 4.5
        assert updated.forwardHandling_cost == 0.3
        assert updated.common_name == "Tilapia"
        assert updated.cus_id == cus_id

    @pytest.mark.asyncio
    async def test_update_and_delete_missing_raise_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_price(db_session, 404, CustomerProductUpdate(cnf=1.0))
        with pytest.raises(NotFoundError):
            await self.service.delete_price(db_session, 404)

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        cus_id = await self._customer(db_session)
        row = await self.service.create_price(db_session, CustomerProductCreate(cus_id=cus_id))

        await self.service.delete_price(db_session, row.id)

        assert await self.service.list_for_customer(db_session, cus_id) == []
