"""Error types raised by the Sankey layout pipeline.

Only structural problems with the input graph are exceptions. An empty or
fully filtered table is a normal outcome and comes back as ``EmptyGraph``.
"""

from __future__ import annotations


class SankeyError(Exception):
    """Base class for every error raised by sankey_markup."""


class ConfigError(SankeyError, ValueError):
    """A configuration option has an unusable value."""


class StructuralError(SankeyError):
    """The flow graph cannot be laid out. Aborts the whole chart.

    Attributes:
        label: The node label involved, when known.
        row:   1-based input row number (header counted as row 1), when known.
    """

    def __init__(self, message: str, label: str | None = None, row: int | None = None) -> None:
        super().__init__(message)
        self.label = label
        self.row = row


class SelfLoopError(StructuralError):
    """A row flows from a node to itself."""

    def __init__(self, label: str, row: int) -> None:
        super().__init__(
            f"Sankey chart error: Self-loop detected at row {row} - {label!r} cannot flow to itself",
            label=label,
            row=row,
        )


class CycleError(StructuralError):
    """Level propagation kept rising along a cycle reachable from a source node."""

    def __init__(self, label: str, level: int) -> None:
        super().__init__(
            f"Sankey chart error: cycle detected through {label!r} (level {level} exceeds node count)",
            label=label,
        )
        self.level = level
