"""Layout IR types shared by every pipeline stage.

Each stage produces a new frozen snapshot; nothing here is mutated after
construction and nothing outlives a single render call.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ─── Graph Input ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Edge:
    """A weighted source → target connection.

    ``row`` is the 1-based input row (the header is row 1) this edge came
    from. Aggregated edges keep the row of their first occurrence.
    """

    source: str
    target: str
    value: float
    row: int | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.source, self.target)


# ─── Nodes and Levels ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NodeBox:
    """A sized and positioned node.

    ``top`` and ``height`` are percentages of the nominal vertical band.
    ``order`` is the node's index within its level.
    """

    label: str
    level: int
    order: int
    inflow: float
    outflow: float
    in_count: int
    out_count: int
    top: float = 0.0
    height: float = 0.0

    @property
    def throughput(self) -> float:
        return max(self.inflow, self.outflow)

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class Level:
    """Nodes sharing one horizontal rank, in first-appearance order."""

    index: int
    nodes: tuple[NodeBox, ...]

    @property
    def content_height(self) -> float:
        """Bottom of the lowest node, or 0 for an empty level."""
        return max((n.bottom for n in self.nodes), default=0.0)


# ─── Flows ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Flow:
    """An aggregated edge with its geometry at both ends.

    The two ends are sized independently, so ``from_height`` and
    ``to_height`` usually differ (the flow tapers).
    """

    source: str
    target: str
    value: float
    index: int
    from_level: int
    to_level: int
    from_top: float
    from_height: float
    to_top: float
    to_height: float


# ─── Results ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SankeyLayout:
    """Complete layout: sized levels plus positioned flows.

    ``height_scale`` is the factor by which the vertical band had to grow to
    fit the tallest level (1.0 when everything fit in 100%).
    """

    levels: tuple[Level, ...]
    flows: tuple[Flow, ...]
    height_scale: float = 1.0
    nodes: dict[str, NodeBox] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not self.nodes:
            index = {n.label: n for level in self.levels for n in level.nodes}
            object.__setattr__(self, "nodes", index)

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def node(self, label: str) -> NodeBox:
        return self.nodes[label]

    def flows_from(self, label: str) -> list[Flow]:
        return [f for f in self.flows if f.source == label]

    def flows_to(self, label: str) -> list[Flow]:
        return [f for f in self.flows if f.target == label]


@dataclass(frozen=True)
class EmptyGraph:
    """Nothing to render: no rows, or no row survived filtering."""

    reason: str

    def __bool__(self) -> bool:
        return False
