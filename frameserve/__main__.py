#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Frameserve — serve a directory of images as an auto-refreshing slideshow.

Examples:
  # everything from the environment (PORT, PHOTOS_DIR, AUTH_TOKEN)
  python -m frameserve

  # local try-out on a high port
  python -m frameserve --port 8080 --photos-dir ~/Pictures/frame -v

  # JSON logs for a container log collector
  AUTH_TOKEN=s3cret python -m frameserve --json-logs

Flags override environment variables, which override frameserve.toml.
"""

import argparse
import sys
from typing import List, Optional

import uvicorn

from frameserve.core.config import load_settings
from frameserve.core.errors import ConfigError
from frameserve.core.logs import resolve_level, setup_logging
from frameserve.main import create_app


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="frameserve", description="Frameserve: directory-backed photo slideshow server.")
    ap.add_argument("--host", help="Bind address (env HOST, default 0.0.0.0)")
    ap.add_argument("--port", help="Listen port (env PORT, default 80)")
    ap.add_argument("--photos-dir", help="Directory of images (env PHOTOS_DIR, default /photos)")
    ap.add_argument("--log-level", help="debug|info|warning|error (overrides -v/-q and LOG_LEVEL)")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Debug logging")
    ap.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    ap.add_argument("--json-logs", action="store_true", help="One JSON object per log line")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(overrides={
            "host": args.host,
            "port": args.port,
            "photos_dir": args.photos_dir,
            "log_level": args.log_level,
        })
        # An explicit flag wins; otherwise -v/-q, otherwise LOG_LEVEL/TOML.
        if args.log_level or not (args.verbose or args.quiet):
            level = resolve_level(0, False, settings.log_level)
        else:
            level = resolve_level(args.verbose, args.quiet, None)
    except (ConfigError, ValueError) as e:
        log = setup_logging()
        log.critical("FATAL: %s", e)
        return 1

    log = setup_logging(level, json_logs=args.json_logs)
    log.info("Frameserve starting: port=%d photos_dir=%s auth=%s",
             settings.port, settings.photos_dir, settings.auth_enabled)
    if not settings.photos_dir.is_dir():
        log.warning("photos dir %s is not a directory (yet); /api/photos will fail until it is", settings.photos_dir)

    app = create_app(settings)
    log.info("Listening on %s:%d", settings.host, settings.port)
    try:
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_config=None,        # keep the handlers installed by setup_logging
            log_level=level,
            timeout_keep_alive=5,
        )
    except SystemExit as e:
        # uvicorn exits this way when the socket cannot be bound
        if e.code:
            log.critical("FATAL: server stopped (exit %s)", e.code)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
