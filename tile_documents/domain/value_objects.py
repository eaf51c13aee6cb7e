"""Authority and request path value helpers."""

from __future__ import annotations

import re
from pathlib import PurePath

ROOT_PATH = "/"
INDEX_PATH = "/index.html"

_UNSAFE_CHARS_RE = re.compile(r"[^a-z0-9.\-]")


def authority_from_path(path: str | PurePath) -> str:
    """Derive a URL-safe authority from a file name.

    ``My Document.tile`` becomes ``my-document.tile``.
    """
    name = PurePath(path).name.lower()
    return _UNSAFE_CHARS_RE.sub("-", name).strip("-")


def normalize_request_path(path: str) -> str:
    return path or ROOT_PATH


def candidate_paths(path: str) -> list[str]:
    """Resource map keys tried for a request path, in lookup order.

    Exact path, without trailing slash, with trailing slash, then
    ``/index.html`` for the root. Duplicates are harmless.
    """
    path = normalize_request_path(path)
    return [
        path,
        path.rstrip("/") if path.endswith("/") else path,
        path if path.endswith("/") else f"{path}/",
        INDEX_PATH if path == ROOT_PATH else path,
    ]
