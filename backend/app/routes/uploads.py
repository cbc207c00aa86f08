"""
ExportDesk Backend: Multipart Helpers
=====================================

Shared by the product and customer upload endpoints: form parts are collected
into a dict (unsent parts left out, so updates can tell "absent" from
"empty") and the optional image part is read into an ImageUpload.
"""

from typing import Any, Dict

from fastapi import UploadFile

from app.services.file_service import ImageUpload


def sent_fields(**fields: Any) -> Dict[str, Any]:
    """Keep only the form parts the client actually sent."""
    return {name: value for name, value in fields.items() if value is not None}


async def read_image(image: UploadFile | None) -> ImageUpload | None:
    """
    Read an optional file part.

    Browsers send an empty part with no filename when no file was chosen;
    that counts as no image.
    """
    if image is None or not image.filename:
        return None
    content = await image.read()
    return ImageUpload(filename=image.filename, content=content, content_length=image.size)
