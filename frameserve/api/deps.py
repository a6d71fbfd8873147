# frameserve/api/deps.py
from fastapi import Request

from frameserve.core.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings are built once in create_app() and kept on app.state."""
    return request.app.state.settings


def get_assets(request: Request):
    return request.app.state.assets
