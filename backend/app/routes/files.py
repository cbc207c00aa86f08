"""
ExportDesk Backend: Stored File Route

GET /api/files/{bucket}/{name}: serves images written by FileService. The
URLs stored on product and customer rows point here.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.exceptions import NotFoundError
from app.schemas.common import ErrorResponse
from app.services.file_service import FILES_ROUTE, file_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix=FILES_ROUTE, tags=["Files"])


@router.get(
    "/{file_path:path}",
    summary="Serve a stored image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Path escapes the storage root", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_file(file_path: str) -> FileResponse:
    # resolve() rejects ../ traversal with a 400
    full_path = file_service.resolve(file_path)
    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    # Object names are never reused, so a long cache is safe
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
