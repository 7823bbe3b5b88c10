"""Number parsing and display formatting shared by the layout and the renderers."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sankey_markup.errors import ConfigError

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# (threshold, suffix), largest first.
_COMPACT_STEPS: tuple[tuple[float, str], ...] = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


def parse_number_prefix(text: str) -> float | None:
    """Leading number of ``text`` (``"12.5 kg"`` → 12.5), or None when there is none."""
    match = _NUMERIC_PREFIX.match(text)
    return float(match.group(0)) if match else None


# ─── Display Format ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NumberFormat:
    """How values are shown in tooltips and the legend.

    Attributes:
        thousands:         Group digits with commas (ignored once a compact suffix applies).
        compact:           Abbreviate with K/M/B/T.
        decimals:          Fixed decimal places; default 0, or 1 with a compact suffix.
        currency_symbol:   Symbol added to the number, if any.
        currency_position: ``"prefix"`` or ``"suffix"``.
    """

    thousands: bool = False
    compact: bool = False
    decimals: int | None = None
    currency_symbol: str | None = None
    currency_position: str = "prefix"

    def __post_init__(self) -> None:
        if self.decimals is not None and (isinstance(self.decimals, bool) or not isinstance(self.decimals, int)):
            raise ConfigError(f"format decimals must be an integer, got {self.decimals!r}")
        if self.decimals is not None and self.decimals < 0:
            raise ConfigError(f"format decimals must not be negative, got {self.decimals!r}")
        if self.currency_position not in ("prefix", "suffix"):
            raise ConfigError(f"currency position must be 'prefix' or 'suffix', got {self.currency_position!r}")

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | NumberFormat | None) -> NumberFormat | None:
        """Build from the host's ``format`` mapping.

        ``{"thousands": true, "compact": false, "decimals": 2,
        "currency": {"symbol": "$", "position": "prefix"}}``
        """
        if options is None or isinstance(options, NumberFormat):
            return options
        if not isinstance(options, Mapping):
            raise ConfigError(f"format must be a mapping, got {options!r}")
        currency = options.get("currency") or {}
        if isinstance(currency, str):
            currency = {"symbol": currency}
        decimals = options.get("decimals")
        if isinstance(decimals, str):
            parsed = parse_number_prefix(decimals)
            if parsed is None or not parsed.is_integer():
                raise ConfigError(f"format decimals must be an integer, got {decimals!r}")
            decimals = int(parsed)
        return cls(
            thousands=bool(options.get("thousands", False)),
            compact=bool(options.get("compact", False)),
            decimals=decimals,
            currency_symbol=currency.get("symbol") or None,
            currency_position=currency.get("position") or "prefix",
        )


def format_number(value: float | None, fmt: NumberFormat | None = None) -> str:
    """Format ``value`` for display; None and NaN give an empty string."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    fmt = fmt or NumberFormat()

    num = float(value)
    suffix = ""
    if fmt.compact:
        for threshold, letter in _COMPACT_STEPS:
            if abs(num) >= threshold:
                num /= threshold
                suffix = letter
                break

    places = fmt.decimals if fmt.decimals is not None else (1 if suffix else 0)
    if fmt.thousands and not suffix:
        text = f"{num:,.{places}f}"
    else:
        text = f"{num:.{places}f}"
    text += suffix

    if fmt.currency_symbol:
        if fmt.currency_position == "prefix":
            text = fmt.currency_symbol + text
        else:
            text += fmt.currency_symbol
    return text
