"""Node sizing — heights, stacking, global scaling and per-level centring.

Steps, in order:
  1. Throughput per node (max of weighted in/out degree).
  2. Raw height relative to the heaviest level.
  3. Minimum-height floors and padding (skipped in proportional mode).
  4. Top-down stacking inside each level.
  5. Uniform shrink of every level when any level exceeds 100%.
  6. Vertical centring of each level on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from sankey_markup.config import (
    MIN_FLOW_HEIGHT,
    MIN_GAP_HEIGHT,
    MIN_NODE_HEIGHT,
    PROPORTIONAL_MIN_HEIGHT,
    SankeyConfig,
)
from sankey_markup.layout.levels import LevelAssignment
from sankey_markup.layout.types import Level, NodeBox

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeSizing:
    """Snapshot produced by ``size_nodes``."""

    nodes: dict[str, NodeBox]
    levels: tuple[Level, ...]
    height_scale: float


def measure_nodes(la: LevelAssignment) -> dict[str, NodeBox]:
    """Unsized NodeBoxes carrying level, order and flow totals."""
    graph = la.graph
    boxes: dict[str, NodeBox] = {}
    for bucket in la.buckets():
        for order, label in enumerate(bucket):
            boxes[label] = NodeBox(
                label=label,
                level=la.levels[label],
                order=order,
                inflow=graph.in_degree(label, weight="value"),
                outflow=graph.out_degree(label, weight="value"),
                in_count=graph.in_degree(label),
                out_count=graph.out_degree(label),
            )
    # Re-key in first-appearance order.
    return {label: boxes[label] for label in la.order}


def node_minimum(node: NodeBox) -> float:
    """Smallest height that keeps a node visible and fits all its flow ends."""
    flow_based = max(node.in_count, node.out_count) * MIN_FLOW_HEIGHT
    return max(MIN_NODE_HEIGHT, flow_based)


def proportional_scale(raw_heights: list[float]) -> float:
    """Uniform scale-up so the smallest node is at least PROPORTIONAL_MIN_HEIGHT."""
    smallest = min(raw_heights, default=0.0)
    if 0 < smallest < PROPORTIONAL_MIN_HEIGHT:
        return PROPORTIONAL_MIN_HEIGHT / smallest
    return 1.0


def _stack_level(
    index: int,
    nodes: list[NodeBox],
    raw: dict[str, float],
    config: SankeyConfig,
) -> tuple[list[NodeBox], float]:
    """Size and stack one level. Returns the placed nodes and content height."""
    heights = [raw[n.label] for n in nodes]
    padding = config.padding_pct

    if not config.proportional:
        small = sum(1 for h in heights if h < MIN_NODE_HEIGHT)
        if small > len(nodes) / 2:
            padding = max(padding, MIN_GAP_HEIGHT)
        heights = [max(h, node_minimum(n)) for h, n in zip(heights, nodes)]

    placed: list[NodeBox] = []
    top = 0.0
    for node, height in zip(nodes, heights):
        placed.append(replace(node, top=top, height=height))
        top += height + padding

    content = top - padding if placed else 0.0
    logger.debug("level %d: %d nodes, content height %.3f%%", index, len(placed), content)
    return placed, content


def _center(level: Level) -> Level:
    offset = (100 - level.content_height) / 2
    if offset <= 0:
        return level
    return replace(level, nodes=tuple(replace(n, top=n.top + offset) for n in level.nodes))


def size_nodes(la: LevelAssignment, config: SankeyConfig | None = None) -> NodeSizing:
    """Compute top/height (percent) for every node.

    Heights are relative to the heaviest level's total throughput, so a
    single-level-wide trunk fills the band and levels stay comparable. Small
    nodes are floored to ``node_minimum`` which may push a level past 100%;
    when that happens every level is shrunk by the same ``height_scale`` so
    proportions between levels survive.
    """
    config = config or SankeyConfig()
    measured = measure_nodes(la)
    buckets = la.buckets()

    level_totals = [sum(measured[label].throughput for label in bucket) for bucket in buckets]
    basis = max(level_totals, default=0.0)
    raw = {label: (n.throughput / basis * 100 if basis > 0 else 0.0) for label, n in measured.items()}

    if config.proportional:
        scale = proportional_scale(list(raw.values()))
        if scale != 1.0:
            raw = {label: h * scale for label, h in raw.items()}

    stacked: list[list[NodeBox]] = []
    tallest = 100.0
    for index, bucket in enumerate(buckets):
        placed, content = _stack_level(index, [measured[label] for label in bucket], raw, config)
        stacked.append(placed)
        tallest = max(tallest, content)

    height_scale = tallest / 100
    if height_scale > 1:
        logger.debug("content reaches %.3f%%, scaling all levels by 1/%.4f", tallest, height_scale)
        stacked = [
            [replace(n, top=n.top / height_scale, height=n.height / height_scale) for n in placed]
            for placed in stacked
        ]

    levels = tuple(_center(Level(index=i, nodes=tuple(placed))) for i, placed in enumerate(stacked))
    by_label = {n.label: n for level in levels for n in level.nodes}
    nodes = {label: by_label[label] for label in la.order}
    return NodeSizing(nodes=nodes, levels=levels, height_scale=height_scale)
