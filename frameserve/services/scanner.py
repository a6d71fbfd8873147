# frameserve/services/scanner.py
# Directory listing -> photo set. Every call re-reads the directory; there is
# no cache to invalidate.
from __future__ import annotations

import logging
import stat
from pathlib import Path
from typing import List, Optional

from frameserve.core.config import IMAGE_EXT
from frameserve.core.errors import InvalidPath, ScanError
from frameserve.schemas.photos import Photo
from frameserve.utils.http import photo_url, safe_join

log = logging.getLogger("frameserve.scanner")

ORDERS = ("mtime_desc", "mtime_asc", "name_asc", "name_desc")
DEFAULT_ORDER = "mtime_desc"


def file_ext(name: str) -> str:
    """Lowercased text from the last dot on; ".jpg" on its own counts as .jpg."""
    i = name.rfind(".")
    return name[i:].lower() if i >= 0 else ""


def is_allowed_ext(name: str) -> bool:
    return file_ext(name) in IMAGE_EXT


def scan_photos(base: Path) -> List[Photo]:
    """
    List allowed image files directly inside `base` (non-recursive).

    Raises ScanError only if the directory itself cannot be listed. Files
    that vanish or change type between listing and stat are skipped.
    """
    try:
        children = list(base.iterdir())
    except OSError as e:
        raise ScanError(base, e) from e

    photos: List[Photo] = []
    for child in children:
        name = child.name
        if child.is_dir() or not is_allowed_ext(name):
            continue

        try:
            # names that are not valid UTF-8 cannot be put in a URL
            name.encode("utf-8")
            full_path = safe_join(base, name)
            st = full_path.stat()
        except (InvalidPath, OSError, UnicodeEncodeError) as e:
            # benign race (deleted/renamed mid-scan) or an odd name
            log.debug("skipping %r: %s", name, e)
            continue
        if not stat.S_ISREG(st.st_mode):
            continue

        mtime = int(st.st_mtime)
        photos.append(Photo(
            url=photo_url(name, mtime),
            name=name,
            mtime=mtime,
            size=st.st_size,
        ))
    return photos


def sort_photos(photos: List[Photo], order: Optional[str]) -> List[Photo]:
    """
    Sort in place and return the list. Unknown or missing orders fall back to
    newest first.
    """
    if order == "mtime_asc":
        photos.sort(key=lambda p: p.mtime)
    elif order == "name_asc":
        photos.sort(key=lambda p: p.name.lower())
    elif order == "name_desc":
        photos.sort(key=lambda p: p.name.lower(), reverse=True)
    else:
        photos.sort(key=lambda p: p.mtime, reverse=True)
    return photos
