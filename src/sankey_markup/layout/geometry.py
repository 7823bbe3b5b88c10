"""Geometry emitter — percentage layout → pixel primitives for a renderer.

Columns alternate node bar / flow column, left to right:

    [level 0] [flows 0→1] [level 1] [flows 1→2] ... [level n-1] [end labels]

Vertically, 100% maps to ``BASE_HEIGHT_PX * height_scale`` so a chart whose
band had to grow gets a proportionally taller canvas.
"""

from __future__ import annotations

from dataclasses import dataclass

from sankey_markup.config import SankeyConfig
from sankey_markup.layout.types import Level, SankeyLayout

ROOT_FONT_PX: int = 16
BASE_HEIGHT_PX: int = 256  # 16rem
LABEL_CHAR_REM: float = 0.5
LABEL_PAD_REM: float = 1.0
LABEL_GAP_PX: int = 6  # space between a bar and its label

# Bézier control points as fractions of the flow span.
CURVE_C1: float = 0.4
CURVE_C2: float = 0.6


@dataclass(frozen=True)
class NodeRect:
    """A node bar in pixel coordinates plus where its label goes."""

    label: str
    level: int
    x: float
    y: float
    width: float
    height: float
    throughput: float
    label_x: float
    label_anchor: str  # "start" or "end"

    @property
    def label_y(self) -> float:
        return self.y + self.height / 2


@dataclass(frozen=True)
class FlowShape:
    """A tapered band from the source bar's right edge to the target's left edge."""

    source: str
    target: str
    value: float
    index: int
    x0: float
    x1: float
    y0_top: float
    y0_bottom: float
    y1_top: float
    y1_bottom: float

    def path_d(self) -> str:
        """SVG path: curved top edge, straight drop, curved bottom edge back."""
        span = self.x1 - self.x0
        c1 = self.x0 + span * CURVE_C1
        c2 = self.x0 + span * CURVE_C2
        return (
            f"M {self.x0:.2f},{self.y0_top:.2f} "
            f"C {c1:.2f},{self.y0_top:.2f} {c2:.2f},{self.y1_top:.2f} {self.x1:.2f},{self.y1_top:.2f} "
            f"L {self.x1:.2f},{self.y1_bottom:.2f} "
            f"C {c2:.2f},{self.y1_bottom:.2f} {c1:.2f},{self.y0_bottom:.2f} {self.x0:.2f},{self.y0_bottom:.2f} Z"
        )


@dataclass(frozen=True)
class SankeyGeometry:
    width: float
    height: float
    height_scale: float
    nodes: tuple[NodeRect, ...]
    flows: tuple[FlowShape, ...]


def label_width_rem(labels: list[str]) -> float:
    """Approximate rendered width of the longest label (0.5rem per char + 1rem)."""
    longest = max((len(label) for label in labels), default=0)
    return longest * LABEL_CHAR_REM + LABEL_PAD_REM


def min_flow_column_width(levels: tuple[Level, ...], end_labels_outside: bool = False) -> float:
    """Narrowest flow column (rem) that keeps labels from colliding.

    Labels of level i point right into flow column i. Labels of the last
    level point left into the final flow column unless they sit outside.
    """
    widths = [label_width_rem([n.label for n in level.nodes]) for level in levels]
    widest = 0.0
    for i in range(len(levels) - 1):
        width = widths[i]
        if i + 1 == len(levels) - 1 and not end_labels_outside:
            width += widths[i + 1]
        widest = max(widest, width)
    return widest


def emit_geometry(layout: SankeyLayout, config: SankeyConfig | None = None) -> SankeyGeometry:
    """Map every node and flow of ``layout`` to pixel coordinates."""
    config = config or SankeyConfig()
    levels = layout.levels
    last = len(levels) - 1

    node_w = float(config.node_width)
    flow_w = max(float(config.flow_width), min_flow_column_width(levels, config.end_labels_outside) * ROOT_FONT_PX)
    canvas_h = BASE_HEIGHT_PX * layout.height_scale

    def column_x(level: int) -> float:
        return level * (node_w + flow_w)

    def py(pct: float) -> float:
        return pct / 100 * canvas_h

    rects: list[NodeRect] = []
    for level in levels:
        x = column_x(level.index)
        for node in level.nodes:
            if level.index == last and last > 0 and not config.end_labels_outside:
                label_x, anchor = x - LABEL_GAP_PX, "end"
            else:
                label_x, anchor = x + node_w + LABEL_GAP_PX, "start"
            rects.append(
                NodeRect(
                    label=node.label,
                    level=level.index,
                    x=x,
                    y=py(node.top),
                    width=node_w,
                    height=py(node.height),
                    throughput=node.throughput,
                    label_x=label_x,
                    label_anchor=anchor,
                )
            )

    shapes = tuple(
        FlowShape(
            source=f.source,
            target=f.target,
            value=f.value,
            index=f.index,
            x0=column_x(f.from_level) + node_w,
            x1=column_x(f.to_level),
            y0_top=py(f.from_top),
            y0_bottom=py(f.from_top + f.from_height),
            y1_top=py(f.to_top),
            y1_bottom=py(f.to_top + f.to_height),
        )
        for f in layout.flows
    )

    width = column_x(last) + node_w if levels else 0.0
    if config.end_labels_outside and levels:
        width += LABEL_GAP_PX + label_width_rem([n.label for n in levels[-1].nodes]) * ROOT_FONT_PX

    return SankeyGeometry(
        width=width,
        height=canvas_h,
        height_scale=layout.height_scale,
        nodes=tuple(rects),
        flows=shapes,
    )
