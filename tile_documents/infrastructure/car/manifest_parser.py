"""MASL manifest extraction from a CAR header.

The header is a DAG-CBOR map. Only the manifest fields are read; format
markers such as ``version`` and ``roots`` and any unknown keys are ignored.
"""

from __future__ import annotations

import logging
from typing import Any

from tile_documents.domain.entities import SRC_KEY, Icon, Manifest, Resource
from tile_documents.domain.exceptions import ManifestSchemaException, TileFormatException

from .dag_cbor import as_array, as_link, as_map, as_text, decode_document

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT_FIELDS = ("description", "short_name", "theme_color", "background_color")


def parse_manifest(header: bytes) -> Manifest:
    """Decode header bytes into a Manifest.

    Raises TileFormatException for undecodable or wrongly shaped data and
    ManifestSchemaException when a mandatory field is missing.
    """
    root = as_map(decode_document(header))
    if root is None:
        raise TileFormatException("CAR header is not a CBOR map")

    name: str | None = None
    resources: dict[str, Resource] = {}
    icons: list[Icon] = []
    optional: dict[str, str | None] = {}

    for key, value in root.items():
        key = as_text(key)
        if key == "name":
            name = as_text(value)
        elif key in _OPTIONAL_TEXT_FIELDS:
            optional[key] = as_text(value)
        elif key == "resources":
            resources = _parse_resources(value)
        elif key == "icons":
            icons = _parse_icons(value)

    if name is None:
        raise ManifestSchemaException("MASL missing `name` field")

    logger.debug(
        "Manifest %r: %d resources, %d icons", name, len(resources), len(icons)
    )
    return Manifest(name=name, resources=resources, icons=icons, **optional)


def _parse_resources(value: Any) -> dict[str, Resource]:
    entries = as_map(value)
    if entries is None:
        raise TileFormatException("`resources` is not a CBOR map")

    resources: dict[str, Resource] = {}
    for key, entry in entries.items():
        path = as_text(key)
        if path is None:
            raise TileFormatException("resource key is not a string")
        resources[path] = _parse_resource(path, entry)
    return resources


def _parse_resource(path: str, value: Any) -> Resource:
    fields = as_map(value)
    if fields is None:
        raise TileFormatException(f"resource entry {path!r} is not a CBOR map")

    src: str | None = None
    headers: dict[str, str] = {}
    for key, field_value in fields.items():
        key = as_text(key)
        if key is None:
            continue
        if key == SRC_KEY:
            cid = as_link(field_value)
            if cid is None:
                raise ManifestSchemaException(f"resource {path!r} `src` is not a CID")
            src = str(cid)
        else:
            text = as_text(field_value)
            if text is not None:
                headers[key] = text

    if src is None:
        raise ManifestSchemaException(f"resource {path!r} missing `src` field")
    return Resource({SRC_KEY: src, **headers})


def _parse_icons(value: Any) -> list[Icon]:
    items = as_array(value)
    if items is None:
        raise TileFormatException("`icons` is not a CBOR array")

    icons: list[Icon] = []
    for item in items:
        fields = as_map(item)
        if fields is None:
            continue
        src: str | None = None
        sizes = ""
        purpose = ""
        for key, field_value in fields.items():
            key = as_text(key)
            if key == "src":
                src = as_text(field_value)
            elif key == "sizes":
                sizes = as_text(field_value) or ""
            elif key == "purpose":
                purpose = as_text(field_value) or ""
        if src is None:
            logger.debug("Skipping icon without `src`")
            continue
        icons.append(Icon(src=src, sizes=sizes, purpose=purpose))
    return icons
