"""
ExportDesk Backend: Customer Price List Route Handlers

/api/exportcustomer-products: the per-customer product price rows.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.customer_product import (
    CustomerProductCreate,
    CustomerProductResponse,
    CustomerProductUpdate,
)
from app.services.customer_product_service import customer_product_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exportcustomer-products", tags=["Customer Price Lists"])

NOT_FOUND = {404: {"description": "Price row or customer not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Invalid or unknown fields", "model": ErrorResponse}}


@router.get(
    "/{cus_id}",
    response_model=List[CustomerProductResponse],
    summary="Price list of a customer, by product name",
)
async def list_prices(
    cus_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[CustomerProductResponse]:
    return await customer_product_service.list_for_customer(db, cus_id)


@router.post(
    "",
    status_code=201,
    response_model=CustomerProductResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Add a price row",
)
async def create_price(
    body: CustomerProductCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CustomerProductResponse:
    return await customer_product_service.create_price(db, body)


@router.put(
    "/{price_id}",
    response_model=CustomerProductResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Update a price row",
)
async def update_price(
    price_id: int,
    body: CustomerProductUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> CustomerProductResponse:
    return await customer_product_service.update_price(db, price_id, body)


@router.delete(
    "/{price_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Delete a price row",
)
async def delete_price(
    price_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await customer_product_service.delete_price(db, price_id)
    return MessageResponse(message="Price deleted successfully")
