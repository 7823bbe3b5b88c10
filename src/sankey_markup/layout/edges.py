"""Edge Builder and Edge Aggregator.

Rows arrive from the host as records whose first three fields are, by
position, the source label, the target label and the value. This module is
the only place that knows about that shape; everything downstream works on
``Edge`` objects.
"""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any

from sankey_markup.errors import SelfLoopError
from sankey_markup.formatters import parse_number_prefix
from sankey_markup.layout.types import Edge

logger = logging.getLogger(__name__)

# Header occupies row 1, so the first data row is row 2.
HEADER_ROWS: int = 1


# ─── Row Adapter ──────────────────────────────────────────────────────────────


def coerce_value(raw: Any) -> float:
    """Coerce a value field to a finite float; anything unusable becomes 0.

    Real numbers of any type (int, float, Decimal, Fraction, numpy scalars)
    pass through, strings are read by their leading numeric prefix
    (``"12.5 kg"`` → 12.5), everything else is 0.
    """
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (numbers.Real, Decimal)):
        value = float(raw)
    elif isinstance(raw, str):
        value = parse_number_prefix(raw) or 0.0
    else:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _label(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def row_fields(row: Any, keys: Sequence[Any] | None) -> tuple[Any, Any, Any]:
    """Read (source, target, value) positionally from a row.

    Mapping rows are read through ``keys`` (the column names of the first
    row); sequence rows by index. Missing fields come back as ``None``.
    """
    if isinstance(row, Mapping):
        cols = keys or list(row.keys())
        picked = [row.get(k) for k in cols[:3]]
    else:
        picked = list(row[:3])
    picked.extend([None] * (3 - len(picked)))
    return picked[0], picked[1], picked[2]


# ─── Edge Builder ─────────────────────────────────────────────────────────────


def build_edges(rows: Iterable[Any]) -> list[Edge]:
    """Turn input rows into raw edges, in input order.

    Rows with an empty label or a value ≤ 0 are dropped. A kept row whose
    source equals its target raises ``SelfLoopError``.
    """
    edges: list[Edge] = []
    keys: list[Any] | None = None

    for index, row in enumerate(rows):
        if keys is None and isinstance(row, Mapping):
            keys = list(row.keys())
        raw_source, raw_target, raw_value = row_fields(row, keys)
        source = _label(raw_source)
        target = _label(raw_target)
        value = coerce_value(raw_value)
        row_number = index + 1 + HEADER_ROWS

        if not source or not target or value <= 0:
            logger.debug("dropping row %d: source=%r target=%r value=%r", row_number, source, target, raw_value)
            continue
        if source == target:
            raise SelfLoopError(source, row_number)

        edges.append(Edge(source=source, target=target, value=value, row=row_number))

    return edges


# ─── Edge Aggregator ──────────────────────────────────────────────────────────


def aggregate_edges(edges: Iterable[Edge]) -> list[Edge]:
    """Merge edges with the same (source, target) by summing their values.

    Direction matters: A→B and B→A stay separate. Output order is the order
    in which each pair first appeared.
    """
    merged: dict[tuple[str, str], Edge] = {}
    count = 0
    for edge in edges:
        count += 1
        existing = merged.get(edge.key)
        if existing is None:
            merged[edge.key] = edge
        else:
            merged[edge.key] = Edge(
                source=existing.source,
                target=existing.target,
                value=existing.value + edge.value,
                row=existing.row,
            )

    if count != len(merged):
        logger.debug("aggregated %d edges into %d", count, len(merged))
    return list(merged.values())
