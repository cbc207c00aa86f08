"""
ExportDesk Backend: Product Route Handlers
==========================================

What:  /api/productlist: the product catalogue and the variants nested in
       each product.
How:   Thin handlers; ProductService does the work.

Endpoints:
    GET    /api/productlist
    GET    /api/productlist/{product_id}
    POST   /api/productlist/upload                      (multipart)
    PUT    /api/productlist/upload/{product_id}         (multipart)
    DELETE /api/productlist/{product_id}

    GET    /api/productlist/{product_id}/variants
    POST   /api/productlist/{product_id}/variants
    PUT    /api/productlist/{product_id}/variants/{variant_id}
    DELETE /api/productlist/{product_id}/variants/{variant_id}
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.uploads import read_image, sent_fields
from app.schemas.common import ErrorResponse, MessageResponse, validate_payload
from app.schemas.product import ProductForm, ProductResponse, Variant, VariantInput
from app.services.product_service import product_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/productlist", tags=["Products"])

NOT_FOUND = {404: {"description": "Product not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Invalid input", "model": ErrorResponse}}
CONFLICT = {409: {"description": "Concurrent write, retry", "model": ErrorResponse}}


@router.get("", response_model=List[ProductResponse], summary="List products")
async def list_products(db: AsyncSession = Depends(get_db_session)) -> List[ProductResponse]:
    return await product_service.list_products(db)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Get a product",
)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    return await product_service.get_product(db, product_id)


@router.post(
    "/upload",
    status_code=201,
    response_model=ProductResponse,
    responses=INVALID,
    summary="Create a product",
    description=(
        "Multipart form. `variants` is an optional JSON array of "
        "{size, unit, purchasing_price}; `image` is an optional picture."
    ),
)
async def create_product(
    common_name: str | None = Form(default=None),
    scientific_name: str | None = Form(default=None),
    category: str | None = Form(default=None),
    variants: str | None = Form(default=None, description="JSON array of variants"),
    image: UploadFile | None = File(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    form = validate_payload(
        ProductForm,
        sent_fields(
            common_name=common_name,
            scientific_name=scientific_name,
            category=category,
            variants=variants,
        ),
    )
    return await product_service.create_product(db, form, await read_image(image))


@router.put(
    "/upload/{product_id}",
    response_model=ProductResponse,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Update a product",
    description=(
        "Multipart form. A new `image` replaces the picture; otherwise "
        "`existing_image_url` (or the stored picture) is kept. Omitting "
        "`variants` keeps the stored variants."
    ),
)
async def update_product(
    product_id: int,
    common_name: str | None = Form(default=None),
    scientific_name: str | None = Form(default=None),
    category: str | None = Form(default=None),
    variants: str | None = Form(default=None, description="JSON array of variants"),
    existing_image_url: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    form = validate_payload(
        ProductForm,
        sent_fields(
            common_name=common_name,
            scientific_name=scientific_name,
            category=category,
            variants=variants,
            existing_image_url=existing_image_url,
        ),
    )
    return await product_service.update_product(db, product_id, form, await read_image(image))


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Delete a product",
)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await product_service.delete_product(db, product_id)
    return MessageResponse(message="Product deleted")


# ══════════════════════════════════════════════════════════════════════════
# Variants
# ══════════════════════════════════════════════════════════════════════════

@router.get(
    "/{product_id}/variants",
    response_model=List[Variant],
    responses=NOT_FOUND,
    summary="List the variants of a product",
)
async def list_variants(
    product_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[Variant]:
    return await product_service.list_variants(db, product_id)


@router.post(
    "/{product_id}/variants",
    status_code=201,
    response_model=Variant,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Add a variant",
)
async def add_variant(
    product_id: int,
    body: VariantInput,
    db: AsyncSession = Depends(get_db_session),
) -> Variant:
    return await product_service.add_variant(db, product_id, body)


@router.put(
    "/{product_id}/variants/{variant_id}",
    response_model=Variant,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Update a variant",
)
async def update_variant(
    product_id: int,
    variant_id: str,
    body: VariantInput,
    db: AsyncSession = Depends(get_db_session),
) -> Variant:
    return await product_service.update_variant(db, product_id, variant_id, body)


@router.delete(
    "/{product_id}/variants/{variant_id}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, **CONFLICT},
    summary="Delete a variant",
)
async def delete_variant(
    product_id: int,
    variant_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await product_service.delete_variant(db, product_id, variant_id)
    return MessageResponse(message="Variant deleted")
