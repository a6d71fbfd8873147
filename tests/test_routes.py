import json

import pytest
from fastapi.testclient import TestClient

from frameserve.core.config import Settings
from frameserve.main import create_app
from frameserve.middleware.security import SECURITY_HEADERS


@pytest.fixture(autouse=True)
def _secret_outside(photos_dir, make_photo):
    # sits next to the photos dir, never inside it
    make_photo(photos_dir.parent, "secret.jpg", 1, b"top secret")

def _names(resp):
    return [p["name"] for p in resp.json()["photos"]]

# ---- /api/photos ----

def test_listing_default_is_newest_first(client):
    r = client.get("/api/photos")
    assert r.status_code == 200
    assert r.headers["cache-control"] == "no-store"
    assert r.headers["content-type"].startswith("application/json")
    body = r.json()
    assert body["count"] == 2
    assert _names(r) == ["b.png", "a.jpg"]
    assert body["photos"][0] == {"url": "/photos/b.png?v=200", "name": "b.png", "mtime": 200, "size": 8}

@pytest.mark.parametrize("order,expected", [
    ("name_asc", ["a.jpg", "b.png"]),
    ("name_desc", ["b.png", "a.jpg"]),
    ("mtime_asc", ["a.jpg", "b.png"]),
    ("mtime_desc", ["b.png", "a.jpg"]),
    ("", ["b.png", "a.jpg"]),
    ("random", ["b.png", "a.jpg"]),
])
def test_listing_order(client, order, expected):
    assert _names(client.get("/api/photos", params={"order": order})) == expected

def test_listing_round_trip_is_order_independent(client):
    seen = set()
    for order in ("mtime_desc", "mtime_asc", "name_asc", "name_desc"):
        data = json.loads(client.get("/api/photos", params={"order": order}).text)
        seen.add(frozenset((p["name"], p["mtime"], p["size"]) for p in data["photos"]))
    assert seen == {frozenset({("a.jpg", 100, 4), ("b.png", 200, 8)})}

def test_listing_sees_new_files_without_restart(client, photos_dir, make_photo):
    make_photo(photos_dir, "new.gif", 500)
    assert _names(client.get("/api/photos"))[0] == "new.gif"

def test_listing_unreadable_directory_is_500(tmp_path):
    c = TestClient(create_app(Settings(photos_dir=tmp_path / "missing")))
    r = c.get("/api/photos")
    assert r.status_code == 500
    assert r.json()["detail"] == "failed to scan photos directory"
    assert str(tmp_path) not in r.text

def test_listing_rejects_other_methods(client):
    r = client.post("/api/photos")
    assert r.status_code == 405
    assert "GET" in r.headers["allow"]

# ---- /photos/<name> ----

def test_serve_photo(client):
    r = client.get("/photos/b.png?v=200")
    assert r.status_code == 200
    assert r.content == b"bbbbbbbb"
    assert r.headers["content-type"] == "image/png"
    assert r.headers["cache-control"] == "public, max-age=31536000, immutable"

def test_serve_photo_head(client):
    r = client.head("/photos/a.jpg")
    assert r.status_code == 200
    assert r.headers["content-length"] == "4"
    assert r.content == b""

def test_serve_escaped_name(client, photos_dir, make_photo):
    make_photo(photos_dir, "my pic #1.webp", 10, b"webp!")
    url = next(p["url"] for p in client.get("/api/photos").json()["photos"] if p["name"] == "my pic #1.webp")
    r = client.get(url)
    assert r.status_code == 200
    assert r.content == b"webp!"
    assert r.headers["content-type"] == "image/webp"

@pytest.mark.parametrize("path", [
    "/photos/..%2Fsecret.jpg",
    "/photos/..%2F..%2Fsecret.jpg",
    "/photos/%2Fsecret.jpg",
    "/photos//secret.jpg",
    "/photos/..%5Csecret.jpg",
    "/photos/%5Csecret.jpg",
    "/photos/",
    "/photos/c.txt",
    "/photos/missing.jpg",
    "/photos/a%00.jpg",
])
def test_serve_photo_never_escapes(client, path):
    r = client.get(path)
    assert r.status_code == 404
    assert b"top secret" not in r.content

def test_serve_photo_byte_range(client):
    r = client.get("/photos/b.png", headers={"Range": "bytes=0-1"})
    assert r.status_code == 206
    assert r.content == b"bb"
    assert r.headers["content-range"] == "bytes 0-1/8"

def test_serve_bare_extension_name(client, photos_dir, make_photo):
    make_photo(photos_dir, ".jpg", 5, b"dot")
    r = client.get("/photos/.jpg")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"

def test_serve_directory_is_404(client, photos_dir):
    (photos_dir / "album.jpg").mkdir()
    assert client.get("/photos/album.jpg").status_code == 404

def test_serve_photo_rejects_other_methods(client):
    r = client.delete("/photos/a.jpg")
    assert r.status_code == 405
    allow = {m.strip() for m in r.headers["allow"].split(",")}
    assert allow == {"GET", "HEAD"}

# ---- UI + static ----

def test_index(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert r.headers["cache-control"] == "no-store"
    assert 'id="imgA"' in r.text and "/static/app.js" in r.text

def test_unknown_path_is_404(client):
    assert client.get("/nope").status_code == 404
    assert client.get("/index.html").status_code == 404

def test_info(client):
    r = client.get("/info")
    assert r.status_code == 200
    assert "seconds" in r.text
    r = client.post("/info")
    assert r.status_code == 405
    assert r.headers["allow"] == "GET"

def test_static_assets(client):
    r = client.get("/static/app.js")
    assert r.status_code == 200
    assert "javascript" in r.headers["content-type"]
    assert r.headers["cache-control"] == "public, max-age=86400"
    r = client.get("/static/style.css")
    assert r.headers["content-type"].startswith("text/css")

@pytest.mark.parametrize("path", ["/static/", "/static/missing.js", "/static/..%2Fmain.py", "/static/sub/app.js"])
def test_static_only_exact_assets(client, path):
    assert client.get(path).status_code == 404

# ---- health + headers ----

def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.text == "ok"
    assert r.headers["content-type"].startswith("text/plain")

@pytest.mark.parametrize("path", ["/", "/healthz", "/api/photos", "/photos/a.jpg", "/nope"])
def test_security_headers_everywhere(client, path):
    r = client.get(path)
    for k, v in SECURITY_HEADERS.items():
        assert r.headers[k] == v
    assert "script-src 'self'" in r.headers["content-security-policy"]
    assert "img-src 'self' data:" in r.headers["content-security-policy"]

def test_unhandled_error_still_gets_security_headers(photos_dir):
    app = create_app(Settings(photos_dir=photos_dir))

    def boom():
        raise RuntimeError("kaboom")
    app.add_api_route("/boom", boom)

    r = TestClient(app, raise_server_exceptions=False).get("/boom")
    assert r.status_code == 500
    assert "kaboom" not in r.text
    for k, v in SECURITY_HEADERS.items():
        assert r.headers[k] == v
