"""
ExportDesk Backend: Customer Price List Schemas
===============================================

What:  Explicit request/response models for /api/exportcustomer-products.
Why:   Price rows used to be written straight from the request body; the
       models below fix the accepted columns and reject anything else.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CustomerProductFields(BaseModel):
    """Every writable column of a price row, all optional."""

    model_config = {"extra": "forbid", "str_strip_whitespace": True, "allow_inf_nan": False}

    product_id: Optional[int] = None
    common_name: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    size_range: Optional[str] = Field(default=None, max_length=100)

    purchasing_price: Optional[float] = Field(default=None, ge=0)
    exfactoryprice: Optional[float] = None
    margin: Optional[float] = None
    margin_percentage: Optional[float] = None
    export_doc: Optional[float] = None
    transport_cost: Optional[float] = None
    loading_cost: Optional[float] = None
    airway_cost: Optional[float] = None
    forwardHandling_cost: Optional[float] = None
    multiplier: Optional[float] = None
    divisor: Optional[float] = None
    freight_cost: Optional[float] = None
    gross_weight_tier: Optional[str] = Field(default=None, max_length=20)
    fob_price: Optional[float] = None
    cnf: Optional[float] = None


class CustomerProductCreate(CustomerProductFields):
    """Body of POST /api/exportcustomer-products."""
    cus_id: int


class CustomerProductUpdate(CustomerProductFields):
    """Body of PUT /api/exportcustomer-products/{id}; only sent fields change."""
    cus_id: Optional[int] = None


class CustomerProductResponse(CustomerProductFields):
    id: int
    cus_id: int

    model_config = {"from_attributes": True, "extra": "ignore"}
