"""HTTP-shaped responses for ``tile://<authority>/<path>`` requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tile_documents.domain.exceptions import (
    BlockNotFoundException,
    BlockReadException,
    ResourceMissingSrcException,
    ResourceNotFoundException,
    TileNotLoadedException,
)
from tile_documents.domain.services import TileService

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_ALLOW_ORIGIN = "*"


@dataclass(frozen=True)
class TileResponse:
    status: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None


class TileProtocolHandler:
    """Turns (authority, path) requests into status/headers/body triples.

    Lookup failures become 404 responses, missing ``src`` and block read
    failures become 500 responses. Nothing is raised to the caller.
    """

    def __init__(
        self,
        service: TileService,
        default_content_type: str = DEFAULT_CONTENT_TYPE,
        allow_origin: str = DEFAULT_ALLOW_ORIGIN,
    ) -> None:
        self._service = service
        self._default_content_type = default_content_type
        self._allow_origin = allow_origin

    def handle(self, authority: str, path: str) -> TileResponse:
        try:
            resolved = self._service.resolve(authority, path)
        except TileNotLoadedException:
            return self._error(404, "tile not loaded")
        except ResourceNotFoundException as e:
            return self._error(404, str(e))
        except ResourceMissingSrcException:
            return self._error(500, "resource missing src")
        except (BlockNotFoundException, BlockReadException) as e:
            logger.warning("Block read failed for %s%s: %s", authority, path, e)
            return self._error(500, str(e))

        headers = [
            ("content-type", resolved.content_type(self._default_content_type)),
            ("access-control-allow-origin", self._allow_origin),
        ]
        headers.extend(resolved.resource.headers())
        return TileResponse(status=200, headers=headers, body=resolved.body)

    @staticmethod
    def _error(status: int, message: str) -> TileResponse:
        return TileResponse(
            status=status,
            headers=[("content-type", "text/plain")],
            body=message.encode("utf-8"),
        )
