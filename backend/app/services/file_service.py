"""
ExportDesk Backend: Object Storage Service
==========================================

What:  Validates uploaded images, writes them to the object store and returns
       the public URL that gets recorded on the owning row.
How:   Objects live under <storage_root>/<bucket>/<name>; the bucket is
       `product-images` or `customer-images`. Files are served back by
       GET /api/files/<bucket>/<name>.
Who:   Called by ProductService and CustomerService on multipart uploads.

Object names:
    <unix-millis>-<8 hex chars><ext>, e.g. 1705312800123-3fa85f64.jpg
    The random suffix keeps two uploads in the same millisecond apart; no
    part of the client's filename except its extension is kept.
"""

import logging
import os
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from app.config import settings
from app.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

PRODUCT_BUCKET = "product-images"
CUSTOMER_BUCKET = "customer-images"
BUCKETS = {PRODUCT_BUCKET, CUSTOMER_BUCKET}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}

# URL prefix under which stored objects are served
FILES_ROUTE = "/api/files"


@dataclass(frozen=True)
class ImageUpload:
    """An image file part read from a multipart request."""
    filename: str
    content: bytes
    content_length: Optional[int] = None


class FileService:
    """
    Manages image upload validation, storage and cleanup.

    Lifecycle of an uploaded image:
        1. Route reads the multipart file part → FileService.upload()
        2. Extension check
        3. Size check (empty files and files over MAX_FILE_SIZE are rejected)
        4. Bytes are written to <bucket>/<object name>
        5. The public URL is returned and stored on the record
        6. If the record write then fails, cleanup_object() removes the file
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                         If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """
        Check the extension against the allowed image types.

        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if the extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="image",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Validate file size against the configured maximum.

        Args:
            content_length: Size reported by the client (may be None or inaccurate)
            actual_size: Actual byte count of the uploaded file

        Raises:
            ValidationError for empty or oversized files
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="Uploaded image is empty.",
                field="image",
            )

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="image",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="image",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def _generate_object_path(self, bucket: str, extension: str) -> Tuple[Path, str]:
        """
        Build a unique object path inside a bucket.

        Returns: Tuple of (absolute_path, object_key) where object_key is
                 "<bucket>/<name>".
        """
        if bucket not in BUCKETS:
            raise FileStorageError(
                message="Unknown storage bucket",
                context={"bucket": bucket},
            )
        name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension}"
        object_key = f"{bucket}/{name}"
        return self.storage_root / object_key, object_key

    def public_url(self, object_key: str) -> str:
        """Public URL of a stored object, e.g. /api/files/product-images/1705312800123-3fa85f64.jpg"""
        return f"{settings.public_base_url.rstrip('/')}{FILES_ROUTE}/{object_key}"

    def object_key_from_url(self, url: Optional[str]) -> Optional[str]:
        """Inverse of public_url(); None for URLs this store did not issue."""
        if not url:
            return None
        marker = f"{FILES_ROUTE}/"
        _, found, key = url.partition(marker)
        if not found or key.split("/", 1)[0] not in BUCKETS:
            return None
        return key

    def resolve(self, object_key: str) -> Path:
        """
        Absolute path of an object, refusing keys that escape the storage root.

        Raises:
            ValidationError for traversal attempts such as "../../etc/passwd"
        """
        full_path = (self.storage_root / object_key).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError:
            raise ValidationError(message="Invalid file path", field="path")
        return full_path

    async def store_file(self, bucket: str, content: bytes, extension: str) -> str:
        """
        Write validated content to the bucket.

        Returns: The object key ("<bucket>/<name>").
        Raises:  FileStorageError if directory creation or the write fails.
        """
        absolute_path, object_key = self._generate_object_path(bucket, extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("Object stored: %s (%d bytes)", object_key, len(content))
            return object_key

        except OSError as e:
            logger.error("Failed to store object at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

    async def upload(self, bucket: str, image: ImageUpload) -> str:
        """
        Validate and store an image, returning its public URL.

        Validation order: extension, then size, then the write.
        """
        ext = self.validate_extension(image.filename)
        self.validate_size(image.content_length, len(image.content))
        object_key = await self.store_file(bucket, image.content, ext)
        return self.public_url(object_key)

    async def cleanup_object(self, url: Optional[str]) -> None:
        """
        Remove an object previously returned by upload().

        When:   The record write that was meant to reference it failed.
        Errors: Missing files are ignored; other failures are logged, never raised.
        """
        object_key = self.object_key_from_url(url)
        if object_key is None:
            return
        try:
            path = self.resolve(object_key)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up object: %s", object_key)
            else:
                logger.debug("Cleanup: object already gone: %s", object_key)
        except (OSError, ValidationError) as e:
            logger.warning("Failed to clean up object %s: %s", object_key, str(e))


file_service = FileService()
