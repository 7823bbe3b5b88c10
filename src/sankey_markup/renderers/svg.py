"""SVG renderer — renders Sankey geometry to a standalone SVG string."""

from __future__ import annotations

from sankey_markup.formatters import NumberFormat, format_number
from sankey_markup.layout.geometry import FlowShape, NodeRect, SankeyGeometry

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 12
FONT_FAMILY = "sans-serif"
PADDING = 20  # canvas padding in pixels
TITLE_H = 28  # vertical space reserved for a title
SUBTITLE_H = 18  # extra header space when a subtitle sits under the title
FLOW_OPACITY = 0.45
SUBTITLE_COLOR = "#666666"

LEGEND_ROW_H = 18
LEGEND_SWATCH = 10
LEGEND_ITEM_GAP = 16  # horizontal space between legend items
CHAR_W = FONT_SIZE * 0.6  # rough glyph width used to size labels

PALETTE: tuple[str, ...] = (
    "#4e79a7",
    "#f28e2b",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc948",
    "#b07aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ac",
    "#86bcb6",
    "#d37295",
)


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


def _num(value: float) -> str:
    """Compact number for tooltips: integers without a trailing .0."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _display(value: float, fmt: NumberFormat | None) -> str:
    if fmt is None:
        return _num(value)
    return format_number(value, fmt) or _num(value)


# ─── Node Rendering ─────────────────────────────────────────────────────────


def _render_node(rect: NodeRect, color: str, fmt: NumberFormat | None = None) -> str:
    tooltip = _escape(f"{rect.label}: {_display(rect.throughput, fmt)}")
    return (
        f'<rect class="sankey-node" x="{rect.x:.2f}" y="{rect.y:.2f}" '
        f'width="{rect.width:.2f}" height="{rect.height:.2f}" fill="{color}">'
        f"<title>{tooltip}</title></rect>\n"
        f'<text x="{rect.label_x:.2f}" y="{rect.label_y:.2f}" dominant-baseline="central" '
        f'text-anchor="{rect.label_anchor}" {_font()}>{_escape(rect.label)}</text>'
    )


# ─── Flow Rendering ─────────────────────────────────────────────────────────


def _gradient_id(prefix: str, shape: FlowShape) -> str:
    return f"{prefix}-grad-{shape.index}"


def _render_gradient(shape: FlowShape, grad_id: str, from_color: str, to_color: str) -> str:
    return (
        f'<linearGradient id="{grad_id}" gradientUnits="userSpaceOnUse" '
        f'x1="{shape.x0:.2f}" y1="0" x2="{shape.x1:.2f}" y2="0">'
        f'<stop offset="0%" stop-color="{from_color}"/>'
        f'<stop offset="100%" stop-color="{to_color}"/>'
        "</linearGradient>"
    )


def _render_flow(shape: FlowShape, grad_id: str, fmt: NumberFormat | None = None) -> str:
    tooltip = _escape(f"{shape.source} → {shape.target}: {_display(shape.value, fmt)}")
    return (
        f'<path class="sankey-flow" d="{shape.path_d()}" fill="url(#{grad_id})" '
        f'fill-opacity="{FLOW_OPACITY}"><title>{tooltip}</title></path>'
    )


# ─── Legend Rendering ───────────────────────────────────────────────────────


def _legend_entries(geometry: SankeyGeometry, fmt: NumberFormat | None) -> list[tuple[str, str]]:
    """(label, text) per node in chart order; the value is shown only with a format."""
    entries = []
    for rect in geometry.nodes:
        text = rect.label
        if fmt is not None:
            text += f" {_display(rect.throughput, fmt)}"
        entries.append((rect.label, text))
    return entries


def _place_legend(entries: list[tuple[str, str]], max_width: float) -> list[tuple[float, int]]:
    """Left-to-right placement, wrapping to a new row when ``max_width`` is reached.

    Returns an (x, row) pair per entry.
    """
    placed: list[tuple[float, int]] = []
    x, row = 0.0, 0
    for _, text in entries:
        item_w = LEGEND_SWATCH + 4 + len(text) * CHAR_W
        if x > 0 and x + item_w > max_width:
            x, row = 0.0, row + 1
        placed.append((x, row))
        x += item_w + LEGEND_ITEM_GAP
    return placed


def _render_legend_item(x: float, y: float, color: str, text: str) -> str:
    return (
        f'<g class="sankey-legend-item">'
        f'<rect x="{x:.2f}" y="{y - LEGEND_SWATCH / 2:.2f}" width="{LEGEND_SWATCH}" '
        f'height="{LEGEND_SWATCH}" fill="{color}"/>'
        f'<text x="{x + LEGEND_SWATCH + 4:.2f}" y="{y:.2f}" dominant-baseline="central" '
        f"{_font()}>{_escape(text)}</text></g>"
    )


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes Sankey geometry, produces an SVG string.

    Args:
        title:         Optional chart title drawn above the diagram.
        id_prefix:     Prefix for gradient ids, so several charts can share a page.
        subtitle:      Smaller line under the title; ignored without a title.
        legend:        Draw a swatch and label per node under the diagram.
        number_format: Formatting for tooltip and legend values.
    """

    def __init__(
        self,
        title: str | None = None,
        id_prefix: str = "sankey",
        *,
        subtitle: str | None = None,
        legend: bool = False,
        number_format: NumberFormat | None = None,
    ) -> None:
        self.title = title
        self.id_prefix = id_prefix
        self.subtitle = subtitle
        self.legend = legend
        self.number_format = number_format

    def _colors(self, geometry: SankeyGeometry) -> dict[str, str]:
        return {rect.label: PALETTE[i % len(PALETTE)] for i, rect in enumerate(geometry.nodes)}

    def _header_height(self) -> int:
        if not self.title:
            return 0
        return TITLE_H + (SUBTITLE_H if self.subtitle else 0)

    def render(self, geometry: SankeyGeometry) -> str:
        if not geometry.nodes:
            return ""

        colors = self._colors(geometry)
        fmt = self.number_format
        top = PADDING + self._header_height()
        # Labels can extend past the first/last bar, leave a label's width of room.
        side = PADDING + max((len(r.label) for r in geometry.nodes), default=0) * CHAR_W
        svg_w = round(geometry.width + 2 * side)

        entries = _legend_entries(geometry, fmt) if self.legend else []
        placed = _place_legend(entries, svg_w - 2 * PADDING)
        legend_h = (max(row for _, row in placed) + 1) * LEGEND_ROW_H + PADDING / 2 if placed else 0
        svg_h = round(geometry.height + top + PADDING + legend_h)

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{svg_w}" height="{svg_h}" viewBox="0 0 {svg_w} {svg_h}">',
        ]
        if self.title:
            parts.append(f"<title>{_escape(self.title)}</title>")

        # Gradients, one per flow
        parts.append("<defs>")
        for shape in geometry.flows:
            grad_id = _gradient_id(self.id_prefix, shape)
            parts.append(_render_gradient(shape, grad_id, colors[shape.source], colors[shape.target]))
        parts.append("</defs>")

        parts.append(f'<rect width="{svg_w}" height="{svg_h}" fill="white"/>')
        if self.title:
            parts.append(
                f'<text x="{svg_w / 2:.2f}" y="{PADDING + FONT_SIZE:.2f}" text-anchor="middle" '
                f'{_font(FONT_SIZE + 4)} font-weight="bold">{_escape(self.title)}</text>'
            )
            if self.subtitle:
                parts.append(
                    f'<text class="sankey-subtitle" x="{svg_w / 2:.2f}" y="{PADDING + FONT_SIZE + SUBTITLE_H:.2f}" '
                    f'text-anchor="middle" {_font()} fill="{SUBTITLE_COLOR}">{_escape(self.subtitle)}</text>'
                )

        parts.append(f'<g transform="translate({side:.2f},{top})">')

        # Flows (behind nodes)
        for shape in geometry.flows:
            parts.append(_render_flow(shape, _gradient_id(self.id_prefix, shape), fmt))

        # Nodes (on top)
        for rect in geometry.nodes:
            parts.append(_render_node(rect, colors[rect.label], fmt))

        parts.append("</g>")

        if placed:
            legend_top = top + geometry.height + PADDING / 2
            parts.append(f'<g class="sankey-legend" transform="translate({PADDING},{legend_top:.2f})">')
            for (label, text), (x, row) in zip(entries, placed):
                y = row * LEGEND_ROW_H + LEGEND_ROW_H / 2
                parts.append(_render_legend_item(x, y, colors[label], text))
            parts.append("</g>")

        parts.append("</svg>")
        return "\n".join(parts)
