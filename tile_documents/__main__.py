"""CLI entry point for the tile documents server."""

from __future__ import annotations

import logging
import sys


def main() -> None:
    try:
        import click
    except ImportError:
        print("Error: 'click' package is required. Install with: pip install click", file=sys.stderr)
        sys.exit(1)

    @click.command()
    @click.argument("files", nargs=-1, type=click.Path())
    @click.option(
        "--config", "-c",
        default=None,
        help="Path to YAML config file",
    )
    @click.option(
        "--mode", "-m",
        type=click.Choice(["stdio", "sse", "streamable-http"]),
        default=None,
        help="Transport mode: stdio, sse, or streamable-http (overrides config/env)",
    )
    @click.option(
        "--host",
        default=None,
        help="Host for HTTP server (overrides config/env)",
    )
    @click.option(
        "--port",
        type=int,
        default=None,
        help="Port for HTTP server (overrides config/env)",
    )
    @click.option(
        "--verbose", "-v",
        is_flag=True,
        default=None,
        help="Enable debug logging (overrides config/env)",
    )
    def cli(
        files: tuple[str, ...],
        config: str | None,
        mode: str | None,
        host: str | None,
        port: int | None,
        verbose: bool | None,
    ) -> None:
        """Serve .tile documents (CAR files with a MASL manifest).

        FILES are tile files or directories of tiles opened at startup.
        Loaded tiles are reachable through MCP tools and, in HTTP modes,
        at /tile/<authority>/<path>.

        Configuration priority: YAML config < env vars (TILE_DOCS_*) < CLI arguments.
        """
        from tile_documents.config import load_config

        cli_overrides = {
            "server.mode": mode,
            "server.host": host,
            "server.port": port,
            "server.verbose": verbose,
        }

        app_config = load_config(config_path=config, cli_overrides=cli_overrides)
        app_config.tiles.paths.extend(files)

        log_level = logging.DEBUG if app_config.server.verbose else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stderr,
        )

        from tile_documents.server import create_server

        server = create_server(app_config)

        if app_config.server.mode == "stdio":
            server.run(transport="stdio")
        else:
            server.run(
                transport=app_config.server.mode,
                host=app_config.server.host,
                port=app_config.server.port,
            )

    cli()


if __name__ == "__main__":
    main()
