"""
Public file serving for the storage buckets.

Avatars and publication documents are served by bucket and key, matching
the URLs FileSystemStore.public_url hands out.
"""

import mimetypes
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from advisornet.api.deps import get_file_store, get_rules
from advisornet.rules.models import Rules

router = APIRouter()

CACHE_CONTROL = "public, max-age=3600"


@router.get("/{bucket}/{path:path}")
def serve_file(
    bucket: str,
    path: str,
    store: Any = Depends(get_file_store),
    rules: Rules = Depends(get_rules),
) -> Response:
    if bucket not in rules.uploads.buckets:
        raise HTTPException(status_code=404, detail="File not found")

    try:
        data = store.get(bucket, path)
    except (FileNotFoundError, ValueError):
        raise HTTPException(status_code=404, detail="File not found") from None

    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return Response(
        content=data,
        media_type=media_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )
