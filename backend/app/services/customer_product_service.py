"""
ExportDesk Backend: Customer Price List Service

Rows are written only from the explicit CustomerProductCreate/Update models,
so the set of writable columns is fixed.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_errors
from app.exceptions import NotFoundError
from app.models.customer import ExportCustomer
from app.models.customer_product import CustomerProductPrice
from app.schemas.customer_product import CustomerProductCreate, CustomerProductUpdate

logger = logging.getLogger(__name__)


class CustomerProductService:

    async def _ensure_customer(self, db: AsyncSession, cus_id: int) -> None:
        async with translate_errors("load the customer"):
            customer = await db.get(ExportCustomer, cus_id)
        if customer is None:
            raise NotFoundError(resource="customer", resource_id=str(cus_id))

    async def list_for_customer(self, db: AsyncSession, cus_id: int) -> List[CustomerProductPrice]:
        async with translate_errors("load the price list"):
            result = await db.execute(
                select(CustomerProductPrice)
                .where(CustomerProductPrice.cus_id == cus_id)
                .order_by(CustomerProductPrice.common_name, CustomerProductPrice.id)
            )
            return list(result.scalars().all())

    async def get_price(self, db: AsyncSession, price_id: int) -> CustomerProductPrice:
        async with translate_errors("load the price"):
            price = await db.get(CustomerProductPrice, price_id)
        if price is None:
            raise NotFoundError(resource="price", resource_id=str(price_id))
        return price

    async def create_price(
        self, db: AsyncSession, data: CustomerProductCreate
    ) -> CustomerProductPrice:
        await self._ensure_customer(db, data.cus_id)
        async with translate_errors("create the price"):
            price = CustomerProductPrice(**data.model_dump())
            db.add(price)
            await db.flush()
        logger.info("Price %s added for customer %s", price.id, price.cus_id)
        return price

    async def update_price(
        self, db: AsyncSession, price_id: int, data: CustomerProductUpdate
    ) -> CustomerProductPrice:
        """Apply only the fields the client sent."""
        price = await self.get_price(db, price_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("cus_id") is None:
            changes.pop("cus_id", None)
        else:
            await self._ensure_customer(db, changes["cus_id"])

        async with translate_errors("update the price"):
            for field, value in changes.items():
                setattr(price, field, value)
            await db.flush()
        logger.info("Price %s updated (%d fields)", price.id, len(changes))
        return price

    async def delete_price(self, db: AsyncSession, price_id: int) -> None:
        price = await self.get_price(db, price_id)
        async with translate_errors("delete the price"):
            await db.delete(price)
            await db.flush()
        logger.info("Price %s deleted", price_id)


customer_product_service = CustomerProductService()
