"""CORS for the browser form builder.

The request id header is exposed so the builder can show it alongside a
failed save or submission.
"""

from __future__ import annotations

from typing import Iterable
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


EXPOSE_HEADERS: list[str] = ["X-Request-Id"]
ALLOWED_METHODS: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def apply_cors(app: FastAPI, *, origins: Iterable[str] | None = None) -> None:
    origin_list = [o for o in (origins or ()) if o] or ["*"]
    wildcard = "*" in origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origin_list,
        # Browsers reject credentials with a wildcard origin.
        allow_credentials=not wildcard,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
        expose_headers=EXPOSE_HEADERS,
    )


__all__ = ["ALLOWED_METHODS", "EXPOSE_HEADERS", "apply_cors"]
