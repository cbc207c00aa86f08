"""
ExportDesk Backend: Product and Variant Schemas
===============================================

What:  Pydantic models for the product catalogue and its nested variants.

Identifier policy:
    Variant ids are strings everywhere in the API. Older documents may hold
    numeric ids (millisecond timestamps); they are read back as their string
    form so a single exact comparison works for both.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, Json, field_validator


def canonical_variant_id(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    # 1700000000000.0 and 1700000000000 must compare equal
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (int, float)):
        return str(value)
    return value


class VariantInput(BaseModel):
    """
    Body of POST/PUT /api/productlist/{productId}/variants[/{variantId}].

    Example:
        {"size": "10kg", "unit": "box", "purchasing_price": 12.5}
    """
    model_config = {"str_strip_whitespace": True, "allow_inf_nan": False}

    size: str = Field(min_length=1, max_length=100, description="Pack size, e.g. '10kg'")
    unit: str = Field(min_length=1, max_length=50, description="Packing unit, e.g. 'box'")
    purchasing_price: float = Field(ge=0, description="Purchase price, non-negative")


class VariantDraft(VariantInput):
    """A variant sent inside a full product form; the id may be omitted."""
    id: Optional[str] = Field(default=None, description="Existing variant id, if any")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return canonical_variant_id(v)


class Variant(BaseModel):
    """
    A variant as stored on its product.

    Unknown keys on stored entries are carried through untouched. Older
    entries may hold numbers in size or unit, or a price saved as text; they
    are read back as stored rather than rejected.
    """
    model_config = {"extra": "allow", "coerce_numbers_to_str": True}

    id: Optional[str] = None
    size: Optional[str] = None
    unit: Optional[str] = None
    purchasing_price: Optional[Union[float, str]] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return canonical_variant_id(v)


class ProductForm(BaseModel):
    """
    Multipart form fields of POST /upload and PUT /upload/{id}.

    `variants` arrives as a JSON string (form fields are flat); omitting it on
    update keeps the stored variants.
    """
    model_config = {"str_strip_whitespace": True}

    common_name: str = Field(min_length=1, max_length=255)
    scientific_name: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    existing_image_url: Optional[str] = None
    variants: Optional[Json[List[VariantDraft]]] = None

    @field_validator("variants", mode="before")
    @classmethod
    def blank_variants_as_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("scientific_name", "category", "existing_image_url")
    @classmethod
    def blank_as_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ProductResponse(BaseModel):
    """Full product document, variants included."""
    id: int
    common_name: str
    scientific_name: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    variants: List[Variant] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("variants", mode="before")
    @classmethod
    def null_variants_as_empty(cls, v: Any) -> Any:
        return v or []
