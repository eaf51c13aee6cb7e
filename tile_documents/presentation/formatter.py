"""Markdown formatter for tile manifests and resolved resources."""

from __future__ import annotations

from tile_documents.domain.entities import Manifest, TileOpened
from tile_documents.presentation.protocol import TileResponse

TEXT_PREVIEW_LIMIT = 4000

_TEXT_TYPES = ("text/", "application/json", "application/javascript", "application/xml", "image/svg+xml")


class MarkdownFormatter:
    """Formats tile data as Markdown for MCP tool responses."""

    def format_error(self, exception: Exception) -> str:
        return f"**Error:** {exception}\n"

    def format_opened(self, opened: TileOpened) -> str:
        parts = [
            f"Opened **{opened.manifest.name}** as `{opened.authority}`",
            f"URL: `tile://{opened.authority}/`\n",
        ]
        parts.append(self.format_manifest(opened.manifest))
        return "\n".join(parts)

    def format_manifest(self, manifest: Manifest) -> str:
        parts: list[str] = [f"## {manifest.name}\n"]

        if manifest.description:
            parts.append(manifest.description)
            parts.append("")

        details = [
            ("Short name", manifest.short_name),
            ("Theme color", manifest.theme_color),
            ("Background color", manifest.background_color),
        ]
        for label, value in details:
            if value:
                parts.append(f"**{label}:** `{value}`")
        if any(value for _, value in details):
            parts.append("")

        if manifest.resources:
            parts.append(f"**Resources ({len(manifest.resources)}):**\n")
            for path in sorted(manifest.resources):
                content_type = manifest.resources[path].content_type
                suffix = f" ({content_type})" if content_type else ""
                parts.append(f"- `{path}`{suffix}")
            parts.append("")
        else:
            parts.append("No resources.\n")

        if manifest.icons:
            parts.append(f"**Icons ({len(manifest.icons)}):**\n")
            for icon in manifest.icons:
                extra = " ".join(v for v in (icon.sizes, icon.purpose) if v)
                parts.append(f"- `{icon.src}` {extra}".rstrip())
            parts.append("")

        return "\n".join(parts)

    def format_tile_list(self, tiles: dict[str, Manifest]) -> str:
        if not tiles:
            return "No tiles loaded.\n"

        parts: list[str] = [
            f"Loaded tiles ({len(tiles)}):\n",
            "| Authority | Name | Resources |",
            "|-----------|------|-----------|",
        ]
        for authority in sorted(tiles):
            manifest = tiles[authority]
            parts.append(f"| `{authority}` | {manifest.name} | {len(manifest.resources)} |")
        parts.append("")
        return "\n".join(parts)

    def format_response(self, authority: str, path: str, response: TileResponse) -> str:
        parts: list[str] = [f"**GET** `tile://{authority}{path or '/'}` → {response.status}\n"]

        for key, value in response.headers:
            parts.append(f"- `{key}: {value}`")
        parts.append("")

        content_type = response.header("content-type") or ""
        if _is_text(content_type):
            text = response.body.decode("utf-8", errors="replace")
            if len(text) > TEXT_PREVIEW_LIMIT:
                text = text[:TEXT_PREVIEW_LIMIT] + "\n..."
            parts.append(f"```\n{text}\n```\n")
        else:
            parts.append(f"*{len(response.body)} bytes of binary content*\n")

        return "\n".join(parts)


def _is_text(content_type: str) -> bool:
    return content_type.lower().startswith(_TEXT_TYPES)
