"""Full layout pipeline: rows → edges → levels → node sizes → flows."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sankey_markup.config import SankeyConfig
from sankey_markup.layout.edges import aggregate_edges, build_edges
from sankey_markup.layout.flows import position_flows
from sankey_markup.layout.levels import LevelAssignment
from sankey_markup.layout.sizing import size_nodes
from sankey_markup.layout.types import EmptyGraph, SankeyLayout

logger = logging.getLogger(__name__)

NO_DATA = "no data provided"
NO_EDGES = "no valid edges"


def full_layout(rows: Iterable[Any], config: SankeyConfig | None = None) -> SankeyLayout | EmptyGraph:
    """Run every layout stage on ``rows``.

    Returns ``EmptyGraph`` when there is nothing to draw. Raises
    ``StructuralError`` (self-loop or cycle) when the graph cannot be laid out.
    """
    config = config or SankeyConfig()
    rows = list(rows)
    if not rows:
        return EmptyGraph(NO_DATA)

    edges = aggregate_edges(build_edges(rows))
    if not edges:
        return EmptyGraph(NO_EDGES)

    la = LevelAssignment.assign(edges)
    sizing = size_nodes(la, config)
    flows = position_flows(edges, sizing, config)

    logger.debug(
        "laid out %d nodes, %d flows over %d levels (height scale %.4f)",
        len(sizing.nodes),
        len(flows),
        la.level_count,
        sizing.height_scale,
    )
    return SankeyLayout(
        levels=sizing.levels,
        flows=tuple(flows),
        height_scale=sizing.height_scale,
        nodes=sizing.nodes,
    )
