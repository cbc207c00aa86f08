"""
ExportDesk Backend: Product Service Tests
=========================================

What:  Product CRUD: variant drafts from the form, image precedence on
       update, cleanup of stored images when the row write fails.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.schemas.common import validate_payload
from app.schemas.product import ProductForm
from app.services.file_service import ImageUpload
from app.services.product_service import ProductService, prepare_drafts


def product_form(**fields) -> ProductForm:
    return validate_payload(ProductForm, {"common_name": "Tilapia", **fields})


class TestPrepareDrafts:

    def test_missing_ids_are_generated(self):
        form = product_form(variants='[{"size": "1kg", "unit": "bag", "purchasing_price": 2}]')
        entries = prepare_drafts(form.variants)
        assert entries[0]["id"]
        assert entries[0]["size"] == "1kg"

    def test_numeric_ids_become_strings(self):
        form = product_form(
            variants='[{"id": 1700000000000, "size": "1kg", "unit": "bag", "purchasing_price": 2}]'
        )
        assert prepare_drafts(form.variants)[0]["id"] == "1700000000000"

    def test_duplicate_ids_rejected(self):
        form = product_form(
            variants=(
                '[{"id": "a", "size": "1kg", "unit": "bag", "purchasing_price": 2},'
                ' {"id": "a", "size": "2kg", "unit": "bag", "purchasing_price": 3}]'
            )
        )
        with pytest.raises(ValidationError, match="Duplicate variant id"):
            prepare_drafts(form.variants)


class TestProductForm:

    def test_common_name_required(self):
        with pytest.raises(ValidationError, match="common_name"):
            validate_payload(ProductForm, {"category": "Fish"})

    def test_malformed_variants_json_rejected(self):
        with pytest.raises(ValidationError, match="variants"):
            product_form(variants="[not json")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError, match="purchasing_price"):
            product_form(variants='[{"size": "1kg", "unit": "bag", "purchasing_price": -1}]')

    def test_blank_variants_treated_as_absent(self):
        assert product_form(variants="  ").variants is None


class TestProductCrud:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session):
        created = await self.service.create_product(
            db_session,
            product_form(
                scientific_name="Oreochromis niloticus",
                category="Fish",
                variants='[{"size": "1kg", "unit": "bag", "purchasing_price": 2}]',
            ),
        )
        await db_session.commit()

        fetched = await self.service.get_product(db_session, created.id)
        assert fetched.common_name == "Tilapia"
        assert fetched.scientific_name == "Oreochromis niloticus"
        assert len(fetched.variants) == 1
        assert fetched.image_url is None

    @pytest.mark.asyncio
    async def test_list_is_ordered_by_name(self, db_session):
        for name in ("Shrimp", "Barramundi", "Mackerel"):
            await self.service.create_product(db_session, product_form(common_name=name))
        await db_session.commit()

        names = [p.common_name for p in await self.service.list_products(db_session)]
        assert names == ["Barramundi", "Mackerel", "Shrimp"]

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_product(db_session, 404)

    @pytest.mark.asyncio
    async def test_update_without_variants_keeps_them(self, db_session):
        created = await self.service.create_product(
            db_session,
            product_form(variants='[{"id": "v1", "size": "1kg", "unit": "bag", "purchasing_price": 2}]'),
        )
        await db_session.commit()

        updated = await self.service.update_product(
            db_session, created.id, product_form(common_name="Red Tilapia")
        )

        assert updated.common_name == "Red Tilapia"
        assert [v.id for v in updated.variants] == ["v1"]

    @pytest.mark.asyncio
    async def test_update_replaces_variants_when_sent(self, db_session):
        created = await self.service.create_product(
            db_session,
            product_form(variants='[{"id": "v1", "size": "1kg", "unit": "bag", "purchasing_price": 2}]'),
        )
        await db_session.commit()

        updated = await self.service.update_product(
            db_session, created.id, product_form(variants="[]")
        )
        assert updated.variants == []

    @pytest.mark.asyncio
    async def test_update_keeps_unsent_optional_fields(self, db_session):
        created = await self.service.create_product(
            db_session, product_form(category="Fish", scientific_name="Oreochromis")
        )
        await db_session.commit()

        updated = await self.service.update_product(
            db_session, created.id, product_form(category="Frozen")
        )
        assert updated.category == "Frozen"
        assert updated.scientific_name == "Oreochromis"

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_product(db_session, 404, product_form())

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        created = await self.service.create_product(db_session, product_form())
        await db_session.commit()

        await self.service.delete_product(db_session, created.id)

        with pytest.raises(NotFoundError):
            await self.service.get_product(db_session, created.id)


class TestProductImages:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_create_stores_image_url(self, db_session, sample_image_bytes):
        with patch("app.services.product_service.file_service") as mock_files:
            mock_files.upload = AsyncMock(return_value="/api/files/product-images/1-abc.jpg")

            created = await self.service.create_product(
                db_session,
                product_form(),
                ImageUpload(filename="fish.jpg", content=sample_image_bytes),
            )

        assert created.image_url == "/api/files/product-images/1-abc.jpg"
        mock_files.upload.assert_awaited_once()
        assert mock_files.upload.await_args.args[0] == "product-images"

    @pytest.mark.asyncio
    async def test_update_image_precedence(self, db_session, sample_image_bytes):
        with patch("app.services.product_service.file_service") as mock_files:
            mock_files.upload = AsyncMock(return_value="/api/files/product-images/new.jpg")
            created = await self.service.create_product(
                db_session, product_form(),
                ImageUpload(filename="a.jpg", content=sample_image_bytes),
            )

            # No upload, no existing_image_url: stored URL kept
            kept = await self.service.update_product(db_session, created.id, product_form())
            assert kept.image_url == "/api/files/product-images/new.jpg"

            # existing_image_url wins over the stored URL
            pointed = await self.service.update_product(
                db_session, created.id,
                product_form(existing_image_url="https://cdn.example.com/fish.png"),
            )
            assert pointed.image_url == "https://cdn.example.com/fish.png"

            # A new upload wins over existing_image_url
            mock_files.upload = AsyncMock(return_value="/api/files/product-images/newer.jpg")
            replaced = await self.service.update_product(
                db_session, created.id,
                product_form(existing_image_url="https://cdn.example.com/fish.png"),
                ImageUpload(filename="b.jpg", content=sample_image_bytes),
            )
            assert replaced.image_url == "/api/files/product-images/newer.jpg"

    @pytest.mark.asyncio
    async def test_update_of_missing_product_stores_no_image(self, db_session, sample_image_bytes):
        with patch("app.services.product_service.file_service") as mock_files:
            mock_files.upload = AsyncMock(return_value="/api/files/product-images/orphan.jpg")

            with pytest.raises(NotFoundError):
                await self.service.update_product(
                    db_session, 404, product_form(),
                    ImageUpload(filename="b.jpg", content=sample_image_bytes),
                )
            mock_files.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_drafts_rejected_before_upload(self, db_session, sample_image_bytes):
        form = product_form(
            variants=(
                '[{"id": "a", "size": "1kg", "unit": "bag", "purchasing_price": 2},'
                ' {"id": "a", "size": "2kg", "unit": "bag", "purchasing_price": 3}]'
            )
        )
        with patch("app.services.product_service.file_service") as mock_files:
            mock_files.upload = AsyncMock()
            with pytest.raises(ValidationError):
                await self.service.create_product(
                    db_session, form, ImageUpload(filename="a.jpg", content=sample_image_bytes)
                )
            mock_files.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_insert_cleans_up_stored_image(self, db_session, sample_image_bytes):
        broken_flush = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")))
        with patch("app.services.product_service.file_service") as mock_files, \
             patch.object(db_session, "flush", broken_flush):
            mock_files.upload = AsyncMock(return_value="/api/files/product-images/orphan.jpg")
            mock_files.cleanup_object = AsyncMock()

            with pytest.raises(DatabaseError) as exc_info:
                await self.service.create_product(
                    db_session, product_form(),
                    ImageUpload(filename="a.jpg", content=sample_image_bytes),
                )

        mock_files.cleanup_object.assert_awaited_once_with("/api/files/product-images/orphan.jpg")
        assert "disk I/O error" in exc_info.value.context["original_error"]
