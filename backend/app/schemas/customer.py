"""
ExportDesk Backend: Export Customer Schemas
"""

from typing import Optional

from pydantic import BaseModel, Field


class CustomerForm(BaseModel):
    """
    Multipart form fields of POST /upload and PUT /upload/{id}.

    The image itself travels as a separate file part; `existing_image_url`
    lets an update keep the current picture.
    """
    model_config = {"str_strip_whitespace": True}

    cus_name: str = Field(min_length=1, max_length=255)
    company_name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None
    country: Optional[str] = Field(default=None, max_length=100)
    airport: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    existing_image_url: Optional[str] = None


class CustomerResponse(BaseModel):
    cus_id: int
    cus_name: str
    company_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    country: Optional[str] = None
    airport: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None

    model_config = {"from_attributes": True}
