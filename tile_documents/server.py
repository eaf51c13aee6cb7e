"""FastMCP server exposing loaded tiles as tools and as an HTTP route."""

from __future__ import annotations

import logging

from tile_documents.config import AppConfig
from tile_documents.domain.entities import TileOpened
from tile_documents.domain.exceptions import DomainException, TileLoadException
from tile_documents.domain.services import TileService
from tile_documents.infrastructure.car.block_reader import BlockReader
from tile_documents.infrastructure.car.container_reader import CarContainerReader
from tile_documents.infrastructure.storage.discovery import TileDiscovery
from tile_documents.infrastructure.storage.tile_store import TileStore
from tile_documents.presentation.formatter import MarkdownFormatter
from tile_documents.presentation.protocol import TileProtocolHandler, TileResponse

logger = logging.getLogger(__name__)


def create_tile_service(store: TileStore | None = None) -> TileService:
    """Wire a TileService over the given (or a fresh) store."""
    return TileService(
        store=store if store is not None else TileStore(),
        reader=CarContainerReader(),
        block_reader=BlockReader(),
    )


def open_startup_tiles(service: TileService, config: AppConfig) -> list[TileOpened]:
    """Open every tile found under the configured paths.

    Failures are logged and skipped so one bad file does not block the rest.
    """
    discovery = TileDiscovery(
        extension=config.tiles.extension,
        recursive=config.tiles.recursive,
    )
    opened: list[TileOpened] = []
    for path in discovery.discover(config.tiles.paths):
        try:
            opened.append(service.open_tile(path))
        except TileLoadException as e:
            logger.warning("Failed to open tile %s: %s", path, e)
    return opened


def to_http_response(result: TileResponse):
    """Convert a TileResponse into a Starlette response.

    HTTP header values must be Latin-1; a manifest header that is not turns
    the response into a 500 instead of failing inside Starlette.
    """
    from starlette.responses import Response

    for key, value in result.headers:
        try:
            key.encode("latin-1")
            value.encode("latin-1")
        except UnicodeEncodeError:
            logger.warning("Header %r is not Latin-1 encodable", key)
            return Response(
                content=f"invalid header value for {key}".encode("utf-8"),
                status_code=500,
                media_type="text/plain",
            )

    return Response(
        content=result.body,
        status_code=result.status,
        headers=dict(result.headers),
    )


def create_server(config: AppConfig, service: TileService | None = None):
    """Create and configure the MCP server.

    Args:
        config: Application configuration (YAML + env + CLI merged).
        service: Pre-built service; a fresh one with an empty store otherwise.
    """
    from fastmcp import FastMCP
    from starlette.concurrency import run_in_threadpool
    from starlette.requests import Request
    from starlette.responses import Response

    mcp = FastMCP("tile-documents")

    if service is None:
        service = create_tile_service()
    service.add_listener(
        lambda event: logger.info("tile:opened %s -> %s", event.authority, event.path)
    )
    open_startup_tiles(service, config)

    handler = TileProtocolHandler(
        service,
        default_content_type=config.protocol.default_content_type,
        allow_origin=config.protocol.allow_origin,
    )
    formatter = MarkdownFormatter()

    @mcp.tool()
    def open_tile(path: str) -> str:
        """Open a .tile document and make it addressable by its authority.

        Args:
            path: Filesystem path to the .tile file
        """
        try:
            opened = service.open_tile(path)
        except DomainException as e:
            return formatter.format_error(e)
        return formatter.format_opened(opened)

    @mcp.tool()
    def list_tiles() -> str:
        """List all loaded tiles with their authorities and names."""
        tiles = {authority: tile.manifest for authority, tile in service.store.snapshot().items()}
        return formatter.format_tile_list(tiles)

    @mcp.tool()
    def get_manifest(authority: str) -> str:
        """Show the manifest (name, resources, icons) of a loaded tile.

        Args:
            authority: Tile authority as returned by open_tile
        """
        try:
            manifest = service.get_manifest(authority)
        except DomainException as e:
            return formatter.format_error(e)
        return formatter.format_manifest(manifest)

    @mcp.tool()
    def read_resource(authority: str, path: str = "/") -> str:
        """Fetch a resource from a loaded tile as tile://<authority><path>.

        Args:
            authority: Tile authority as returned by open_tile
            path: Resource path inside the tile (e.g., '/', '/index.html')
        """
        response = handler.handle(authority, path)
        return formatter.format_response(authority, path, response)

    route = config.protocol.route_prefix.rstrip("/") + "/{authority}{path:path}"

    @mcp.custom_route(route, methods=["GET"])
    async def tile_route(request: Request) -> Response:
        authority = request.path_params["authority"]
        path = request.path_params.get("path", "")
        result = await run_in_threadpool(handler.handle, authority, path)
        return to_http_response(result)

    return mcp
