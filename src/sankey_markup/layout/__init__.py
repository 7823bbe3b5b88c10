"""Sankey layout pipeline.

Stages:
  1. Edge building    (rows → edges, self-loop check)
  2. Aggregation      (merge duplicate source → target pairs)
  3. Level assignment (longest-path rank per node)
  4. Node sizing      (heights, stacking, scaling, centring)
  5. Flow positioning (tapered ends, minimum thickness)
  6. Geometry         (pixel primitives for a renderer)
"""

from sankey_markup.layout.edges import aggregate_edges, build_edges, coerce_value
from sankey_markup.layout.flows import enforce_min_heights, min_flow_height, position_flows
from sankey_markup.layout.geometry import (
    FlowShape,
    NodeRect,
    SankeyGeometry,
    emit_geometry,
    min_flow_column_width,
)
from sankey_markup.layout.levels import LevelAssignment, build_flow_graph, source_nodes
from sankey_markup.layout.pipeline import full_layout
from sankey_markup.layout.sizing import NodeSizing, size_nodes
from sankey_markup.layout.types import Edge, EmptyGraph, Flow, Level, NodeBox, SankeyLayout

__all__ = [
    "Edge",
    "EmptyGraph",
    "Flow",
    "FlowShape",
    "Level",
    "LevelAssignment",
    "NodeBox",
    "NodeRect",
    "NodeSizing",
    "SankeyGeometry",
    "SankeyLayout",
    "aggregate_edges",
    "build_edges",
    "build_flow_graph",
    "coerce_value",
    "emit_geometry",
    "enforce_min_heights",
    "full_layout",
    "min_flow_column_width",
    "min_flow_height",
    "position_flows",
    "size_nodes",
    "source_nodes",
]
