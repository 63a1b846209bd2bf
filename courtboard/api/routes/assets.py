"""Stored asset (avatar) route handler."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from courtboard.services import s3_service
from courtboard.utils.constants import ASSET_CACHE_CONTROL

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/assets/{key:path}")
async def get_asset(key: str):
    """Serve an uploaded file from the object store."""
    try:
        stored = await s3_service.get_file(key)
    except Exception as e:
        logger.error("Error fetching asset %s", key, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching asset: {str(e)}")

    if stored is None:
        raise HTTPException(status_code=404, detail="Not Found")

    body, content_type = stored
    return Response(
        content=body,
        media_type=content_type,
        headers={"Cache-Control": ASSET_CACHE_CONTROL},
    )
