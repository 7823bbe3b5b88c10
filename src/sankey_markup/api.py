"""Public API: lay out or render a Sankey table in one call."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sankey_markup.config import SankeyConfig
from sankey_markup.layout.geometry import emit_geometry
from sankey_markup.layout.pipeline import full_layout
from sankey_markup.layout.types import EmptyGraph, SankeyLayout
from sankey_markup.renderers.base import Renderer
from sankey_markup.renderers.svg import SvgRenderer


def _resolve_config(config: SankeyConfig | Mapping[str, Any] | None) -> SankeyConfig:
    if isinstance(config, SankeyConfig):
        return config
    return SankeyConfig.from_options(config)


def layout_sankey(
    rows: Iterable[Any],
    config: SankeyConfig | Mapping[str, Any] | None = None,
) -> SankeyLayout | EmptyGraph:
    """Lay out a table of (source, target, value) rows.

    ``config`` may be a ``SankeyConfig`` or the host's option mapping.
    """
    return full_layout(rows, _resolve_config(config))


def empty_placeholder(result: EmptyGraph) -> str:
    """Neutral markup emitted in place of a chart with nothing to draw."""
    return f"<!-- Sankey chart: {result.reason} -->"


def render_sankey(
    rows: Iterable[Any],
    config: SankeyConfig | Mapping[str, Any] | None = None,
    *,
    title: str | None = None,
    subtitle: str | None = None,
    renderer: Renderer | None = None,
) -> str:
    """Lay out ``rows`` and render them to markup (SVG by default).

    ``title`` and ``subtitle`` override the ones in ``config``; the legend and
    number format come from ``config``. Raises ``StructuralError`` for
    self-loops and cycles; an empty table renders as an HTML comment
    placeholder.
    """
    resolved = _resolve_config(config)
    result = full_layout(rows, resolved)
    if isinstance(result, EmptyGraph):
        return empty_placeholder(result)
    if renderer is None:
        renderer = SvgRenderer(
            title=title or resolved.title,
            subtitle=subtitle or resolved.subtitle,
            legend=resolved.legend,
            number_format=resolved.number_format,
        )
    return renderer.render(emit_geometry(result, resolved))
