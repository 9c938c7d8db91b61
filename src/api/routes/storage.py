"""Serve uploaded images from local blob storage."""

import mimetypes

from fastapi import APIRouter, Depends, HTTPException, Response

from src.adapters.blob_store import LocalBlobStorage
from src.api.deps import get_blob_storage

router = APIRouter()


@router.get("/{bucket}/{path:path}")
def get_blob(
    bucket: str,
    path: str,
    storage: LocalBlobStorage = Depends(get_blob_storage),
) -> Response:
    try:
        data = storage.read(bucket, path)
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=404, detail="File not found") from e
    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return Response(
        content=data,
        media_type=media_type,
        headers={"Cache-Control": "public, max-age=3600"},
    )
