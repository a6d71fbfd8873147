# frameserve/core/config.py
# Loads Frameserve settings (defaults + optional TOML + environment + CLI).
# - Reads FRAMESERVE_CONFIG or falls back to ./frameserve.toml
# - Environment wins over TOML, explicit overrides (CLI flags) win over both
# - Blank values count as unset
# - The result is a frozen Settings object built once and shared read-only

from __future__ import annotations
from pathlib import Path
import os
from typing import Dict, Mapping, Optional
import tomli as tomllib  # py3.11+: tomllib in stdlib; using tomli for compatibility

from pydantic import BaseModel, ConfigDict

from frameserve.core.errors import ConfigError


# -------------------- Fixed values --------------------
# The extension allowlist is the only test for "is this an image".
IMAGE_EXT = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif"})

AUTH_COOKIE_NAME = "frameserve_auth"
# 365 days: bounded, but effectively "set it and forget it" for a wall display.
AUTH_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


# -------------------- Defaults (used if nothing overrides a key) --------------------
_DEFAULTS = {
    "host": "0.0.0.0",
    "port": "80",
    "photos_dir": "/photos",
    "auth_token": "",
    "log_level": "info",
}

# setting key -> environment variable
_ENV_KEYS = {
    "host": "HOST",
    "port": "PORT",
    "photos_dir": "PHOTOS_DIR",
    "auth_token": "AUTH_TOKEN",
    "log_level": "LOG_LEVEL",
}


class Settings(BaseModel):
    """Process-wide configuration; immutable once built."""
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 80
    photos_dir: Path
    auth_token: str = ""
    log_level: str = "info"

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth_token)

    def __repr__(self) -> str:
        # never print the token itself
        return (
            f"Settings(host={self.host!r}, port={self.port}, photos_dir={str(self.photos_dir)!r}, "
            f"auth={'on' if self.auth_enabled else 'off'}, log_level={self.log_level!r})"
        )

    __str__ = __repr__


# -------------------- Read TOML --------------------

def _find_config_path(env: Mapping[str, str]) -> Optional[Path]:
    """Find frameserve.toml without user input.
    Priority:
      1) FRAMESERVE_CONFIG (must exist if set)
      2) ./frameserve.toml (CWD)
    """
    cfg_env = (env.get("FRAMESERVE_CONFIG") or "").strip()
    if cfg_env:
        p = Path(cfg_env).expanduser()
        if not p.is_file():
            raise ConfigError(f"FRAMESERVE_CONFIG points at a missing file: {p}")
        return p

    p = Path.cwd() / "frameserve.toml"
    if p.is_file():
        return p
    return None


def _load_config_toml(env: Mapping[str, str]) -> dict:
    """Return the [server] table of the config file, or {} if there is none."""
    path = _find_config_path(env)
    if path is None:
        return {}
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    server = data.get("server", {})
    if not isinstance(server, dict):
        raise ConfigError(f"[server] in {path} must be a table")
    return server


# -------------------- Merge --------------------

def _clean(v) -> str:
    return "" if v is None else str(v).strip()


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {raw!r}") from None
    if not (0 < port < 65536):
        raise ConfigError(f"PORT must be 1..65535, got {port}")
    return port


def _resolve_dir(raw: str) -> Path:
    # Like the server's own path handling, this never follows symlinks.
    try:
        return Path(os.path.abspath(os.path.expanduser(raw)))
    except (OSError, ValueError) as e:
        raise ConfigError(f"failed to resolve PHOTOS_DIR {raw!r}: {e}") from e


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, object]] = None,
) -> Settings:
    """
    Build Settings from defaults, the TOML [server] table, the environment and
    explicit overrides (in that order). Raises ConfigError on unusable values.
    """
    env = os.environ if env is None else env
    merged: Dict[str, str] = dict(_DEFAULTS)

    for key, value in _load_config_toml(env).items():
        if key in merged and _clean(value):
            merged[key] = _clean(value)

    for key, var in _ENV_KEYS.items():
        value = _clean(env.get(var))
        if value:
            merged[key] = value

    for key, value in (overrides or {}).items():
        if key in merged and _clean(value):
            merged[key] = _clean(value)

    return Settings(
        host=merged["host"],
        port=_parse_port(merged["port"]),
        photos_dir=_resolve_dir(merged["photos_dir"]),
        # An empty token disables the auth gate entirely.
        auth_token=merged["auth_token"],
        log_level=merged["log_level"].lower(),
    )
