"""Render whole CSV tables end to end and check layout invariants and SVG output."""

import csv
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from sankey_markup import SankeyConfig, SankeyLayout, layout_sankey, render_sankey

TABLES_DIR = Path(__file__).parent / "tables"
SVG_NS = "{http://www.w3.org/2000/svg}"
TOL = 1e-9

TABLES = sorted(TABLES_DIR.glob("*.csv"))
CONFIGS = [SankeyConfig(), SankeyConfig(proportional=True), SankeyConfig(end_labels_outside=True, node_padding=24)]


def read_rows(path: Path) -> list[dict[str, str]]:
    with path.open(newline="") as fh:
        return list(csv.DictReader(fh))


@pytest.mark.parametrize("table", TABLES, ids=[t.stem for t in TABLES])
@pytest.mark.parametrize("config", CONFIGS, ids=["default", "proportional", "outside"])
def test_layout_invariants(table: Path, config: SankeyConfig) -> None:
    """Levels point rightward, nodes stay in the band, flow ends fit their nodes."""
    layout = layout_sankey(read_rows(table), config)
    assert isinstance(layout, SankeyLayout)

    for flow in layout.flows:
        assert flow.to_level > flow.from_level

    for level in layout.levels:
        for node in level.nodes:
            assert node.height > 0
            assert node.top >= -TOL
            assert node.bottom <= 100 + 1e-6
        for upper, lower in zip(level.nodes, level.nodes[1:]):
            assert lower.top >= upper.bottom - TOL

    for label, node in layout.nodes.items():
        out_total = sum(f.from_height for f in layout.flows_from(label))
        in_total = sum(f.to_height for f in layout.flows_to(label))
        assert out_total <= node.height + 1e-6, label
        assert in_total <= node.height + 1e-6, label


@pytest.mark.parametrize("table", TABLES, ids=[t.stem for t in TABLES])
def test_svg_is_well_formed(table: Path) -> None:
    """Every table renders to parseable SVG with one bar per node and one band per flow."""
    rows = read_rows(table)
    layout = layout_sankey(rows)
    svg = render_sankey(rows, title=table.stem)
    root = ET.fromstring(svg)

    bars = [r for r in root.iter(f"{SVG_NS}rect") if r.get("class") == "sankey-node"]
    bands = [p for p in root.iter(f"{SVG_NS}path") if p.get("class") == "sankey-flow"]
    assert len(bars) == len(layout.nodes)
    assert len(bands) == len(layout.flows)


def test_energy_table_levels() -> None:
    layout = layout_sankey(read_rows(TABLES_DIR / "energy.csv"))
    assert [[n.label for n in level.nodes] for level in layout.levels] == [
        ["Coal", "Natural gas", "Nuclear", "Wind", "Solar"],
        ["Electricity", "Heating"],
        ["Homes", "Industry", "Losses"],
    ]
    # Coal → Electricity appears twice and is merged.
    coal = layout.flows_from("Coal")
    assert len(coal) == 1
    assert coal[0].value == pytest.approx(130)


def test_budget_filters_bad_rows() -> None:
    layout = layout_sankey(read_rows(TABLES_DIR / "budget.csv"))
    assert "Ignored" not in layout.nodes
    assert "Bad" not in layout.nodes
    assert layout.node("Fees").height > 0
