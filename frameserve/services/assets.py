# frameserve/services/assets.py
# The bundled UI files, read once at startup and looked up by exact path.
from __future__ import annotations

import mimetypes
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, NamedTuple

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

# Documents are never cached; their asset references change between releases.
DOCUMENTS = {"static/index.html", "static/info.html"}


class Asset(NamedTuple):
    body: bytes
    media_type: str
    cache_control: str


def _media_type(name: str) -> str:
    return mimetypes.guess_type(name)[0] or "application/octet-stream"


def load_assets(static_dir: Path = STATIC_DIR) -> Mapping[str, Asset]:
    """Return a read-only {"static/<name>": Asset} table (top-level files only)."""
    table = {}
    for p in sorted(static_dir.iterdir()):
        if not p.is_file():
            continue
        key = f"static/{p.name}"
        cache = "no-store" if key in DOCUMENTS else "public, max-age=86400"
        table[key] = Asset(p.read_bytes(), _media_type(p.name), cache)
    return MappingProxyType(table)
