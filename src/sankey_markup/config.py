"""Layout configuration: caller-facing knobs plus the numeric policy constants.

All heights in the layout are percentages of a nominal 100% vertical band.
The band grows (``height_scale``) when a level needs more than 100%.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from sankey_markup.errors import ConfigError
from sankey_markup.formatters import NumberFormat, parse_number_prefix

# ─── Numeric Policy ───────────────────────────────────────────────────────────

MIN_NODE_HEIGHT: float = 2.0  # smallest visible node (%)
MIN_GAP_HEIGHT: float = 4.0  # padding used when most of a level is tiny nodes (%)
MIN_FLOW_HEIGHT: float = 0.4  # thinnest visible flow before height scaling (%)
PROPORTIONAL_MIN_HEIGHT: float = 0.4  # smallest node in proportional mode (%), about 1px
PADDING_REFERENCE_PX: float = 400.0  # px height that node_padding is measured against

# ─── Defaults ─────────────────────────────────────────────────────────────────

DEFAULT_NODE_WIDTH: int = 20
DEFAULT_NODE_PADDING: int = 10
DEFAULT_FLOW_WIDTH: int = 96

# Host option names (camelCase) -> SankeyConfig field names.
_OPTION_ALIASES: dict[str, str] = {
    "nodeWidth": "node_width",
    "nodePadding": "node_padding",
    "proportional": "proportional",
    "endLabelsOutside": "end_labels_outside",
    "flowWidth": "flow_width",
    "format": "number_format",
    "legend": "legend",
    "title": "title",
    "subtitle": "subtitle",
}

_NUMERIC_FIELDS: tuple[str, ...] = ("node_width", "node_padding", "flow_width")
_FLAG_FIELDS: tuple[str, ...] = ("proportional", "end_labels_outside", "legend")


@dataclass(frozen=True)
class SankeyConfig:
    """Options consumed by the layout, geometry and rendering stages.

    Attributes:
        node_width:         Width of a node bar in px (cosmetic).
        node_padding:       Vertical gap between nodes of a level in px.
        proportional:       Keep every size strictly proportional to value;
                            disables node and flow minimum heights.
        end_labels_outside: Put last-level labels to the right of the chart.
        flow_width:         Minimum width of a flow column in px.
        number_format:      How values read in tooltips and the legend
                            (host key ``format``).
        legend:             List every node with a colour swatch under the chart.
        title:              Chart heading.
        subtitle:           Smaller line under the title; shown only with a title.
    """

    node_width: int = DEFAULT_NODE_WIDTH
    node_padding: int = DEFAULT_NODE_PADDING
    proportional: bool = False
    end_labels_outside: bool = False
    flow_width: int = DEFAULT_FLOW_WIDTH
    number_format: NumberFormat | None = None
    legend: bool = False
    title: str | None = None
    subtitle: str | None = None

    def __post_init__(self) -> None:
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if value < 0:
                raise ConfigError(f"{name} must not be negative, got {value!r}")
        if self.node_width == 0:
            raise ConfigError("node_width must be positive")

    @property
    def padding_pct(self) -> float:
        """Node padding expressed as a percentage of the vertical band."""
        return self.node_padding / PADDING_REFERENCE_PX * 100

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> SankeyConfig:
        """Build a config from a host option mapping.

        Accepts camelCase host keys (``nodePadding``) and field names
        (``node_padding``). Unknown keys are ignored since the host passes the
        whole chart configuration, most of which is not about layout. Hosts
        often hand over attribute text, so ``"10"`` is read as 10 and
        ``"true"`` as True.
        """
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known or value is None:
                continue
            if name in _FLAG_FIELDS:
                value = _coerce_flag(name, value)
            elif name in _NUMERIC_FIELDS:
                value = _coerce_number(name, value)
            elif name == "number_format":
                value = NumberFormat.from_options(value)
            elif name in ("title", "subtitle"):
                value = str(value) or None
            kwargs[name] = value
        return cls(**kwargs)


def _coerce_number(name: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    parsed = parse_number_prefix(value)
    if parsed is None:
        raise ConfigError(f"{name} must be a number, got {value!r}")
    return int(parsed) if parsed.is_integer() else parsed


def _coerce_flag(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off", ""):
            return False
    if isinstance(value, int):
        return bool(value)
    raise ConfigError(f"{name} must be a boolean, got {value!r}")
