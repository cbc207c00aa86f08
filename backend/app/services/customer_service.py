"""
ExportDesk Backend: Export Customer Service
===========================================

What:  CRUD for export customers, including their optional picture.
How:   Pictures go to the `customer-images` bucket through FileService; the
       returned public URL is stored on the row.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_errors
from app.exceptions import NotFoundError
from app.models.customer import ExportCustomer
from app.models.customer_product import CustomerProductPrice
from app.schemas.customer import CustomerForm
from app.services.file_service import CUSTOMER_BUCKET, ImageUpload, file_service

logger = logging.getLogger(__name__)

# Plain columns copied from the form on create and update
PROFILE_FIELDS = ("company_name", "phone", "address", "country", "airport", "email")


class CustomerService:
    """Business logic for the exportcustomers table."""

    async def list_customers(self, db: AsyncSession) -> List[ExportCustomer]:
        async with translate_errors("load customers"):
            result = await db.execute(select(ExportCustomer).order_by(ExportCustomer.cus_id))
            return list(result.scalars().all())

    async def get_customer(self, db: AsyncSession, cus_id: int) -> ExportCustomer:
        async with translate_errors("load the customer"):
            customer = await db.get(ExportCustomer, cus_id)
        if customer is None:
            raise NotFoundError(resource="customer", resource_id=str(cus_id))
        return customer

    async def create_customer(
        self,
        db: AsyncSession,
        form: CustomerForm,
        image: Optional[ImageUpload] = None,
    ) -> ExportCustomer:
        image_url = None
        if image is not None:
            image_url = await file_service.upload(CUSTOMER_BUCKET, image)

        try:
            async with translate_errors("create the customer"):
                customer = ExportCustomer(
                    cus_name=form.cus_name,
                    image_url=image_url,
                    **{field: getattr(form, field) for field in PROFILE_FIELDS},
                )
                db.add(customer)
                await db.flush()
        except Exception:
            await file_service.cleanup_object(image_url)
            raise

        logger.info("Customer created: %s (%s)", customer.cus_id, customer.cus_name)
        return customer

    async def update_customer(
        self,
        db: AsyncSession,
        cus_id: int,
        form: CustomerForm,
        image: Optional[ImageUpload] = None,
    ) -> ExportCustomer:
        """
        Update a customer from its multipart form.

        Profile fields absent from the form keep their stored value. The
        picture is the new upload if any, else `existing_image_url` if sent,
        else unchanged.
        """
        customer = await self.get_customer(db, cus_id)

        new_image_url = None
        if image is not None:
            new_image_url = await file_service.upload(CUSTOMER_BUCKET, image)

        try:
            async with translate_errors("update the customer"):
                customer.cus_name = form.cus_name
                for field in PROFILE_FIELDS:
                    if field in form.model_fields_set:
                        setattr(customer, field, getattr(form, field))
                if new_image_url is not None:
                    customer.image_url = new_image_url
                elif form.existing_image_url:
                    customer.image_url = form.existing_image_url
                await db.flush()
        except Exception:
            await file_service.cleanup_object(new_image_url)
            raise

        logger.info("Customer updated: %s", customer.cus_id)
        return customer

    async def delete_customer(self, db: AsyncSession, cus_id: int) -> None:
        """Delete a customer together with its price list rows."""
        customer = await self.get_customer(db, cus_id)
        async with translate_errors("delete the customer"):
            await db.execute(
                delete(CustomerProductPrice).where(CustomerProductPrice.cus_id == cus_id)
            )
            await db.delete(customer)
            await db.flush()
        logger.info("Customer deleted: %s", cus_id)


customer_service = CustomerService()
