# frameserve/api/routes/ui.py
# Slideshow document, usage page and bundled static assets.
from typing import Mapping

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from frameserve.api.deps import get_assets
from frameserve.services.assets import Asset

router = APIRouter(tags=["ui"])


def serve_asset(assets: Mapping[str, Asset], key: str) -> Response:
    asset = assets.get(key)
    if asset is None:
        raise HTTPException(404, "not found")
    return Response(asset.body, media_type=asset.media_type,
                    headers={"Cache-Control": asset.cache_control})


@router.get("/")
def index(assets: Mapping[str, Asset] = Depends(get_assets)):
    return serve_asset(assets, "static/index.html")


@router.get("/info")
def info(assets: Mapping[str, Asset] = Depends(get_assets)):
    return serve_asset(assets, "static/info.html")


@router.get("/static/{path:path}")
def static_file(path: str, assets: Mapping[str, Asset] = Depends(get_assets)):
    # Exact-key lookup only: no directory listing, no filesystem access.
    return serve_asset(assets, f"static/{path}")
