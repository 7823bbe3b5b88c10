"""Flow positioning — taper heights, stacking, and minimum visible thickness.

Each flow is sized independently at its two ends: at the source it claims
``value / throughput`` of the source node's height, at the target the same
share of the target node's height. Flows leaving a node are stacked from the
node top without gaps, and so are flows entering it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sankey_markup.config import MIN_FLOW_HEIGHT, SankeyConfig
from sankey_markup.layout.sizing import NodeSizing
from sankey_markup.layout.types import Edge, Flow

logger = logging.getLogger(__name__)


@dataclass
class _FlowEnd:
    """Working geometry for one end of one flow, local to a single call."""

    flow: int
    top: float
    height: float


def stacking_order(edges: list[Edge], sizing: NodeSizing) -> list[Edge]:
    """Edges sorted by (source level, target level); ties keep input order."""
    levels = {label: n.level for label, n in sizing.nodes.items()}
    return sorted(edges, key=lambda e: (levels[e.source], levels[e.target]))


def min_flow_height(height_scale: float) -> float:
    """Thinnest allowed flow end, shrunk along with the band when it grew."""
    return MIN_FLOW_HEIGHT / height_scale if height_scale > 1 else MIN_FLOW_HEIGHT


def _stack(ends: list[_FlowEnd], node_top: float) -> None:
    top = node_top
    for end in ends:
        end.top = top
        top += end.height


def enforce_min_heights(ends: list[_FlowEnd], node_top: float, minimum: float) -> bool:
    """Raise thin flow ends at one side of one node to ``minimum``.

    Space is borrowed proportionally from the ends already at or above the
    minimum. When every end is thin they are all set to the minimum and the
    stack may overflow the node. Returns True if anything changed.
    """
    small = [e for e in ends if e.height < minimum]
    if not small:
        return False
    large = [e for e in ends if e.height >= minimum]

    needed = sum(minimum - e.height for e in small)
    large_total = sum(e.height for e in large)

    if large_total > 0:
        borrow = min(1.0, needed / large_total)
        for end in large:
            end.height *= 1 - borrow
    for end in small:
        end.height = minimum

    _stack(ends, node_top)
    return True


def position_flows(edges: list[Edge], sizing: NodeSizing, config: SankeyConfig | None = None) -> list[Flow]:
    """Compute endpoint geometry for every aggregated edge.

    Returns flows in stacking order with ``index`` set to that position.
    """
    config = config or SankeyConfig()
    nodes = sizing.nodes
    ordered = stacking_order(edges, sizing)

    outgoing: dict[str, list[_FlowEnd]] = {label: [] for label in nodes}
    incoming: dict[str, list[_FlowEnd]] = {label: [] for label in nodes}
    from_ends: list[_FlowEnd] = []
    to_ends: list[_FlowEnd] = []

    for i, edge in enumerate(ordered):
        src = nodes[edge.source]
        tgt = nodes[edge.target]
        start = _FlowEnd(flow=i, top=0.0, height=edge.value / src.throughput * src.height)
        end = _FlowEnd(flow=i, top=0.0, height=edge.value / tgt.throughput * tgt.height)
        outgoing[edge.source].append(start)
        incoming[edge.target].append(end)
        from_ends.append(start)
        to_ends.append(end)

    for label, node in nodes.items():
        _stack(outgoing[label], node.top)
        _stack(incoming[label], node.top)

    if not config.proportional:
        minimum = min_flow_height(sizing.height_scale)
        for side, groups in (("outgoing", outgoing), ("incoming", incoming)):
            for label, ends in groups.items():
                node = nodes[label]
                if not enforce_min_heights(ends, node.top, minimum):
                    continue
                total = sum(e.height for e in ends)
                if total > node.height + 1e-9:
                    logger.debug(
                        "%s flows at %r overflow node (%.4f%% > %.4f%%)", side, label, total, node.height
                    )

    return [
        Flow(
            source=edge.source,
            target=edge.target,
            value=edge.value,
            index=i,
            from_level=nodes[edge.source].level,
            to_level=nodes[edge.target].level,
            from_top=from_ends[i].top,
            from_height=from_ends[i].height,
            to_top=to_ends[i].top,
            to_height=to_ends[i].height,
        )
        for i, edge in enumerate(ordered)
    ]
