# frameserve/api/routes/photos.py
# Endpoints related to the photo directory:
# - GET       /api/photos?order=...
# - GET, HEAD /photos/{name}
import logging
import mimetypes
import stat
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import FileResponse

from frameserve.api.deps import get_settings
from frameserve.core.config import Settings
from frameserve.core.errors import InvalidPath, ScanError
from frameserve.schemas.photos import PhotoListing
from frameserve.services.scanner import file_ext, is_allowed_ext, scan_photos, sort_photos
from frameserve.utils.http import safe_join

log = logging.getLogger("frameserve.photos")

# not in every platform's mime table
mimetypes.add_type("image/webp", ".webp")

api_router = APIRouter(tags=["photos"])     # mounted under /api in main
public_router = APIRouter()                 # mounted without prefix in main

# Images are cached hard; the ?v=mtime token in their URL changes with the file.
IMMUTABLE = "public, max-age=31536000, immutable"


@api_router.get("/photos", response_model=PhotoListing)
def list_photos(response: Response, order: Optional[str] = None,
                settings: Settings = Depends(get_settings)) -> PhotoListing:
    try:
        photos = scan_photos(settings.photos_dir)
    except ScanError as e:
        log.error("scan error: %s", e)
        raise HTTPException(500, "failed to scan photos directory")

    sort_photos(photos, order)
    response.headers["Cache-Control"] = "no-store"
    return PhotoListing(photos=photos, count=len(photos))


@public_router.api_route("/photos/{name:path}", methods=["GET", "HEAD"])
def get_photo(name: str, settings: Settings = Depends(get_settings)):
    # Every failure is the same 404 so nothing about the filesystem leaks.
    # Only bare file names: no subdirectories, no separators of either kind.
    if not name or "/" in name or "\\" in name:
        raise HTTPException(404, "not found")
    if not is_allowed_ext(name):
        raise HTTPException(404, "not found")
    try:
        full_path = safe_join(settings.photos_dir, name)
        st = full_path.stat()
    except (InvalidPath, OSError, ValueError):
        # ValueError: embedded NUL byte
        raise HTTPException(404, "not found")
    if stat.S_ISDIR(st.st_mode):
        raise HTTPException(404, "not found")

    media_type = mimetypes.types_map.get(file_ext(name))
    return FileResponse(full_path, media_type=media_type, headers={"Cache-Control": IMMUTABLE})
