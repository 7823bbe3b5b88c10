"""sankey-markup — Sankey diagram layout engine rendering flow tables to static SVG."""

from sankey_markup.api import layout_sankey, render_sankey
from sankey_markup.config import SankeyConfig
from sankey_markup.errors import ConfigError, CycleError, SankeyError, SelfLoopError, StructuralError
from sankey_markup.formatters import NumberFormat, format_number
from sankey_markup.layout.types import Edge, EmptyGraph, Flow, Level, NodeBox, SankeyLayout

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "CycleError",
    "Edge",
    "EmptyGraph",
    "Flow",
    "Level",
    "NodeBox",
    "NumberFormat",
    "SankeyConfig",
    "SankeyError",
    "SankeyLayout",
    "SelfLoopError",
    "StructuralError",
    "format_number",
    "layout_sankey",
    "render_sankey",
]
