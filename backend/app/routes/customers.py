"""
ExportDesk Backend: Export Customer Route Handlers
==================================================

What:  /api/exportcustomerlist: customer records with an optional picture.
How:   Create and update are multipart forms (the picture travels as the
       `image` file part); the form fields go through the same validation as
       every JSON body.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.uploads import read_image, sent_fields
from app.schemas.common import ErrorResponse, MessageResponse, validate_payload
from app.schemas.customer import CustomerForm, CustomerResponse
from app.services.customer_service import customer_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exportcustomerlist", tags=["Customers"])

NOT_FOUND = {404: {"description": "Customer not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Invalid input", "model": ErrorResponse}}


@router.get("", response_model=List[CustomerResponse], summary="List customers")
async def list_customers(db: AsyncSession = Depends(get_db_session)) -> List[CustomerResponse]:
    return await customer_service.list_customers(db)


@router.get(
    "/{cus_id}",
    response_model=CustomerResponse,
    responses=NOT_FOUND,
    summary="Get a customer",
)
async def get_customer(
    cus_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> CustomerResponse:
    return await customer_service.get_customer(db, cus_id)


@router.post(
    "/upload",
    status_code=201,
    response_model=CustomerResponse,
    responses=INVALID,
    summary="Create a customer",
)
async def create_customer(
    cus_name: str | None = Form(default=None),
    company_name: str | None = Form(default=None),
    phone: str | None = Form(default=None),
    address: str | None = Form(default=None),
    country: str | None = Form(default=None),
    airport: str | None = Form(default=None),
    email: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> CustomerResponse:
    form = validate_payload(
        CustomerForm,
        sent_fields(
            cus_name=cus_name,
            company_name=company_name,
            phone=phone,
            address=address,
            country=country,
            airport=airport,
            email=email,
        ),
    )
    return await customer_service.create_customer(db, form, await read_image(image))


@router.put(
    "/upload/{cus_id}",
    response_model=CustomerResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Update a customer",
)
async def update_customer(
    cus_id: int,
    cus_name: str | None = Form(default=None),
    company_name: str | None = Form(default=None),
    phone: str | None = Form(default=None),
    address: str | None = Form(default=None),
    country: str | None = Form(default=None),
    airport: str | None = Form(default=None),
    email: str | None = Form(default=None),
    existing_image_url: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> CustomerResponse:
    form = validate_payload(
        CustomerForm,
        sent_fields(
            cus_name=cus_name,
            company_name=company_name,
            phone=phone,
            address=address,
            country=country,
            airport=airport,
            email=email,
            existing_image_url=existing_image_url,
        ),
    )
    return await customer_service.update_customer(db, cus_id, form, await read_image(image))


@router.delete(
    "/{cus_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Delete a customer and its price list",
)
async def delete_customer(
    cus_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await customer_service.delete_customer(db, cus_id)
    return MessageResponse(message="Customer deleted")
