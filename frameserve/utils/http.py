# frameserve/utils/http.py
import os
import urllib.parse
from pathlib import Path

from fastapi import Request

from frameserve.core.errors import InvalidPath


def safe_rel_under(base: Path, target: Path):
    """
    Return target's path relative to base if target is inside base, else None.
    Purely lexical: nothing is resolved against the filesystem.
    """
    rel = os.path.relpath(os.path.abspath(target), os.path.abspath(base))
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return None
    return Path(rel)


def safe_join(base: Path, name: str) -> Path:
    """
    Join a bare file name onto base and return the absolute result.

    Only the last path segment of `name` is kept, so "../x.jpg" becomes
    "x.jpg". Raises InvalidPath unless the result is a direct child of base.
    """
    if not name:
        raise InvalidPath("empty name")
    clean = os.path.basename(os.path.normpath(name))
    joined = Path(os.path.abspath(os.path.join(base, clean)))

    rel = safe_rel_under(base, joined)
    if rel is None or len(rel.parts) != 1 or rel.name in ("", os.curdir, os.pardir):
        raise InvalidPath(f"path escapes base dir: {name!r}")
    return joined


def photo_url(name: str, mtime: int) -> str:
    """Public URL for a photo; v=mtime busts browser caches when the file changes."""
    return f"/photos/{urllib.parse.quote(name)}?v={mtime}"


def is_https(request: Request) -> bool:
    """True for direct TLS or a reverse proxy that says it terminated TLS."""
    if request.url.scheme == "https":
        return True
    return request.headers.get("x-forwarded-proto", "").strip().lower() == "https"
