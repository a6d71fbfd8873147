import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from frameserve.core.config import Settings
from frameserve.main import create_app

TOKEN = "s3cret-token"


def _write(dir_: Path, name: str, mtime: int, data: bytes = b"x") -> Path:
    p = dir_ / name
    p.write_bytes(data)
    os.utime(p, (mtime, mtime))
    return p


@pytest.fixture
def make_photo():
    """Write a file with a fixed mtime (unix seconds)."""
    return _write


@pytest.fixture
def photos_dir(tmp_path):
    # a.jpg (mtime 100), b.png (mtime 200), c.txt (ignored)
    d = tmp_path / "photos"
    d.mkdir()
    _write(d, "a.jpg", 100, b"aaaa")
    _write(d, "b.png", 200, b"bbbbbbbb")
    _write(d, "c.txt", 300, b"not an image")
    return d


@pytest.fixture
def client(photos_dir):
    return TestClient(create_app(Settings(photos_dir=photos_dir)))


@pytest.fixture
def auth_client(photos_dir):
    return TestClient(create_app(Settings(photos_dir=photos_dir, auth_token=TOKEN)))
