"""
ExportDesk Backend: Product Service and Variant Store
=====================================================

What:  Product catalogue CRUD plus list/add/update/delete over the variants
       nested inside each product.
Who:   Called by the /api/productlist route handlers.

Variant Store:
    Variants are one JSON array on the product row, so every variant change is

        read (variants, version) → transform the array in memory →
        UPDATE products SET variants = :new, version = version + 1
         WHERE id = :id AND version = :seen

    If another request wrote the product between our read and our write, the
    UPDATE matches no row. The whole cycle is then re-run from a fresh read
    (tenacity, up to VARIANT_WRITE_ATTEMPTS times), so overlapping Add calls
    both land instead of one silently overwriting the other. If every attempt
    loses, the request fails with ConflictError (409).

    Entries the operation does not target are written back exactly as read,
    unknown keys included.
"""

import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from app.config import settings
from app.database import translate_errors
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.product import Product
from app.schemas.product import (
    ProductForm,
    ProductResponse,
    Variant,
    VariantDraft,
    VariantInput,
    canonical_variant_id,
)
from app.services.file_service import PRODUCT_BUCKET, ImageUpload, file_service

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")
VariantEntry = Dict[str, Any]
Mutation = Callable[[List[VariantEntry]], Tuple[List[VariantEntry], ResultT]]


def variant_id_of(entry: Any) -> Optional[str]:
    """Canonical string id of a stored entry (None for malformed entries)."""
    if not isinstance(entry, dict):
        return None
    value = canonical_variant_id(entry.get("id"))
    return value if isinstance(value, str) else None


def new_variant_id(existing: Iterable[Optional[str]]) -> str:
    """A fresh id that collides with none of `existing`."""
    taken = set(existing)
    while True:
        candidate = uuid.uuid4().hex
        if candidate not in taken:
            return candidate


def prepare_drafts(drafts: List[VariantDraft]) -> List[VariantEntry]:
    """
    Turn the variants of a full product form into stored entries.

    Drafts without an id get a generated one.

    Raises:
        ValidationError if two drafts share an id.
    """
    seen = set()
    for draft in drafts:
        if draft.id is None:
            continue
        if draft.id in seen:
            raise ValidationError(
                message=f"Duplicate variant id '{draft.id}'",
                field="variants",
            )
        seen.add(draft.id)

    entries: List[VariantEntry] = []
    for draft in drafts:
        variant_id = draft.id
        if variant_id is None:
            variant_id = new_variant_id(seen)
            seen.add(variant_id)
        entries.append(
            {
                "id": variant_id,
                "size": draft.size,
                "unit": draft.unit,
                "purchasing_price": draft.purchasing_price,
            }
        )
    return entries


class ProductService:
    """
    Business logic for products and their variants.

    Error Handling:
        Missing products raise NotFoundError, driver failures are wrapped in
        DatabaseError by translate_errors(), and lost version checks surface
        as ConflictError.
    """

    # ══════════════════════════════════════════════════════════════════════
    # Products
    # ══════════════════════════════════════════════════════════════════════

    async def list_products(self, db: AsyncSession) -> List[ProductResponse]:
        async with translate_errors("load products"):
            result = await db.execute(
                select(Product)
                .order_by(Product.common_name, Product.id)
                .execution_options(populate_existing=True)
            )
            products = result.scalars().all()
        return [ProductResponse.model_validate(p) for p in products]

    async def _load(self, db: AsyncSession, product_id: int) -> Product:
        # populate_existing: variant writes bypass the identity map
        async with translate_errors("load the product"):
            result = await db.execute(
                select(Product)
                .where(Product.id == product_id)
                .execution_options(populate_existing=True)
            )
            product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return product

    async def get_product(self, db: AsyncSession, product_id: int) -> ProductResponse:
        product = await self._load(db, product_id)
        return ProductResponse.model_validate(product)

    async def create_product(
        self,
        db: AsyncSession,
        form: ProductForm,
        image: Optional[ImageUpload] = None,
    ) -> ProductResponse:
        """
        Insert a product, storing its image first when one was uploaded.

        If the insert fails the stored image is removed again.
        """
        variants = prepare_drafts(form.variants or [])

        image_url = None
        if image is not None:
            image_url = await file_service.upload(PRODUCT_BUCKET, image)

        try:
            async with translate_errors("create the product"):
                product = Product(
                    common_name=form.common_name,
                    scientific_name=form.scientific_name,
                    category=form.category,
                    image_url=image_url,
                    variants=variants,
                )
                db.add(product)
                await db.flush()
        except Exception:
            await file_service.cleanup_object(image_url)
            raise

        logger.info("Product created: %s (%d variants)", product.id, len(variants))
        return ProductResponse.model_validate(product)

    async def update_product(
        self,
        db: AsyncSession,
        product_id: int,
        form: ProductForm,
        image: Optional[ImageUpload] = None,
    ) -> ProductResponse:
        """
        Full-document update of a product.

        Image precedence: a new upload, then `existing_image_url`, then the
        stored URL. Variants are replaced only when the form carries them.
        Optional text fields change only when present in the form.
        """
        variants = prepare_drafts(form.variants) if form.variants is not None else None
        product = await self._load(db, product_id)

        new_image_url = None
        if image is not None:
            new_image_url = await file_service.upload(PRODUCT_BUCKET, image)

        try:
            async with translate_errors("update the product"):
                product.common_name = form.common_name
                for field in ("scientific_name", "category"):
                    if field in form.model_fields_set:
                        setattr(product, field, getattr(form, field))
                if new_image_url is not None:
                    product.image_url = new_image_url
                elif form.existing_image_url:
                    product.image_url = form.existing_image_url
                if variants is not None:
                    product.variants = variants
                try:
                    await db.flush()
                except StaleDataError as e:
                    raise ConflictError(context={"product_id": product_id}) from e
        except Exception:
            await file_service.cleanup_object(new_image_url)
            raise

        logger.info("Product updated: %s (version=%d)", product.id, product.version)
        return ProductResponse.model_validate(product)

    async def delete_product(self, db: AsyncSession, product_id: int) -> None:
        product = await self._load(db, product_id)
        async with translate_errors("delete the product"):
            await db.delete(product)
            try:
                await db.flush()
            except StaleDataError as e:
                raise ConflictError(context={"product_id": product_id}) from e
        logger.info("Product deleted: %s", product_id)

    # ══════════════════════════════════════════════════════════════════════
    # Variant Store
    # ══════════════════════════════════════════════════════════════════════

    async def _read_variants(
        self, db: AsyncSession, product_id: int
    ) -> Tuple[List[VariantEntry], int]:
        """
        Read the variant array and the version it belongs to.

        Column-level select, so a Product already in the session's identity
        map never hides a newer row.
        """
        result = await db.execute(
            select(Product.variants, Product.version).where(Product.id == product_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return list(row.variants or []), row.version

    async def _write_variants(
        self,
        db: AsyncSession,
        product_id: int,
        variants: List[VariantEntry],
        seen_version: int,
    ) -> None:
        """
        Conditional write of the whole array.

        Raises:
            ConflictError if the row's version moved since `seen_version`.
        """
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id, Product.version == seen_version)
            .values(variants=variants, version=Product.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError(
                context={"product_id": product_id, "seen_version": seen_version},
            )

    async def _mutate_variants(
        self,
        db: AsyncSession,
        product_id: int,
        mutate: Mutation,
        action: str,
    ) -> ResultT:
        """
        Run read → mutate → conditional write, re-running on lost version checks.

        `mutate` receives the current entries and returns the new entries and
        the value to hand back to the caller. It may raise (e.g. NotFoundError),
        which aborts without writing.
        """
        async with translate_errors(action):
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(settings.variant_write_attempts),
                retry=retry_if_exception_type(ConflictError),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    variants, version = await self._read_variants(db, product_id)
                    updated, outcome = mutate(variants)
                    await self._write_variants(db, product_id, updated, version)
        return outcome

    async def list_variants(self, db: AsyncSession, product_id: int) -> List[Variant]:
        """Variants of a product in insertion order; [] when the array is null."""
        async with translate_errors("load variants"):
            variants, _ = await self._read_variants(db, product_id)
        return [Variant.model_validate(entry) for entry in variants]

    async def add_variant(
        self, db: AsyncSession, product_id: int, data: VariantInput
    ) -> Variant:
        """Append a new variant with a generated id."""

        def append(variants: List[VariantEntry]) -> Tuple[List[VariantEntry], VariantEntry]:
            entry = {
                "id": new_variant_id(variant_id_of(v) for v in variants),
                "size": data.size,
                "unit": data.unit,
                "purchasing_price": data.purchasing_price,
            }
            return variants + [entry], entry

        entry = await self._mutate_variants(db, product_id, append, "add the variant")
        logger.info("Variant %s added to product %s", entry["id"], product_id)
        return Variant.model_validate(entry)

    async def update_variant(
        self,
        db: AsyncSession,
        product_id: int,
        variant_id: str,
        data: VariantInput,
    ) -> Variant:
        """
        Replace size, unit and price of the first entry with `variant_id`.

        Raises:
            NotFoundError if the product or the variant does not exist; in the
            latter case nothing is written.
        """

        def replace(variants: List[VariantEntry]) -> Tuple[List[VariantEntry], VariantEntry]:
            updated = list(variants)
            for index, entry in enumerate(updated):
                if variant_id_of(entry) == variant_id:
                    updated[index] = {
                        **entry,
                        "size": data.size,
                        "unit": data.unit,
                        "purchasing_price": data.purchasing_price,
                    }
                    return updated, updated[index]
            raise NotFoundError(
                resource="variant",
                resource_id=variant_id,
                context={"product_id": product_id},
            )

        entry = await self._mutate_variants(db, product_id, replace, "update the variant")
        logger.info("Variant %s of product %s updated", variant_id, product_id)
        return Variant.model_validate(entry)

    async def delete_variant(self, db: AsyncSession, product_id: int, variant_id: str) -> int:
        """
        Remove every entry with `variant_id`, keeping the order of the rest.

        Succeeds even when nothing matched. Returns the number removed.
        """

        def remove(variants: List[VariantEntry]) -> Tuple[List[VariantEntry], int]:
            kept = [entry for entry in variants if variant_id_of(entry) != variant_id]
            return kept, len(variants) - len(kept)

        removed = await self._mutate_variants(db, product_id, remove, "delete the variant")
        logger.info("Variant %s removed from product %s (%d entries)", variant_id, product_id, removed)
        return removed


product_service = ProductService()
