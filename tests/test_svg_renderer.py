"""Tests for renderers/svg.py — standalone SVG output."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from sankey_markup.formatters import NumberFormat
from sankey_markup.layout.geometry import SankeyGeometry, emit_geometry
from sankey_markup.layout.pipeline import full_layout
from sankey_markup.renderers import Renderer, SvgRenderer
from sankey_markup.renderers.svg import PALETTE, _escape

SVG_NS = "{http://www.w3.org/2000/svg}"

# ─── Helpers ──────────────────────────────────────────────────────────────────


def geometry_of(*rows: tuple[str, str, float]) -> SankeyGeometry:
    return emit_geometry(full_layout(list(rows)))


def parse(svg: str) -> ET.Element:
    return ET.fromstring(svg)


# ─── Tests ────────────────────────────────────────────────────────────────────


class TestEscape:
    def test_markup_characters(self):
        assert _escape('<a & "b">') == "&lt;a &amp; &quot;b&quot;&gt;"


class TestSvgRenderer:
    def test_satisfies_protocol(self):
        renderer: Renderer = SvgRenderer()
        assert callable(renderer.render)

    def test_well_formed(self):
        root = parse(SvgRenderer().render(geometry_of(("A", "B", 10), ("B", "C", 4))))
        assert root.tag == f"{SVG_NS}svg"

    def test_one_rect_per_node_and_path_per_flow(self):
        svg = SvgRenderer().render(geometry_of(("A", "B", 10), ("B", "C", 4), ("A", "C", 1)))
        root = parse(svg)
        nodes = [r for r in root.iter(f"{SVG_NS}rect") if r.get("class") == "sankey-node"]
        flows = [p for p in root.iter(f"{SVG_NS}path") if p.get("class") == "sankey-flow"]
        assert len(nodes) == 3
        assert len(flows) == 3

    def test_gradient_per_flow(self):
        root = parse(SvgRenderer(id_prefix="c1").render(geometry_of(("A", "B", 1), ("A", "C", 1))))
        ids = [g.get("id") for g in root.iter(f"{SVG_NS}linearGradient")]
        assert ids == ["c1-grad-0", "c1-grad-1"]

    def test_gradient_runs_source_to_target_color(self):
        root = parse(SvgRenderer().render(geometry_of(("A", "B", 1))))
        stops = [s.get("stop-color") for s in root.iter(f"{SVG_NS}stop")]
        assert stops == [PALETTE[0], PALETTE[1]]

    def test_labels_and_tooltips(self):
        root = parse(SvgRenderer().render(geometry_of(("Coal", "Power", 12.5))))
        texts = [t.text for t in root.iter(f"{SVG_NS}text")]
        titles = [t.text for t in root.iter(f"{SVG_NS}title")]
        assert texts == ["Coal", "Power"]
        assert "Coal → Power: 12.5" in titles
        assert "Coal: 12.5" in titles

    def test_labels_escaped(self):
        svg = SvgRenderer().render(geometry_of(("R&D", "<Ops>", 3)))
        root = parse(svg)
        texts = [t.text for t in root.iter(f"{SVG_NS}text")]
        assert texts == ["R&D", "<Ops>"]

    def test_title(self):
        root = parse(SvgRenderer(title="Energy & Flow").render(geometry_of(("A", "B", 1))))
        assert root.find(f"{SVG_NS}title").text == "Energy & Flow"

    def test_empty_geometry(self):
        empty = SankeyGeometry(width=0, height=0, height_scale=1.0, nodes=(), flows=())
        assert SvgRenderer().render(empty) == ""


class TestFormattedValues:
    def test_tooltips_use_number_format(self):
        fmt = NumberFormat(compact=True, currency_symbol="$")
        root = parse(SvgRenderer(number_format=fmt).render(geometry_of(("Sales", "Revenue", 2_500_000))))
        titles = [t.text for t in root.iter(f"{SVG_NS}title")]
        assert "Sales → Revenue: $2.5M" in titles
        assert "Revenue: $2.5M" in titles

    def test_thousands_in_tooltips(self):
        fmt = NumberFormat(thousands=True)
        root = parse(SvgRenderer(number_format=fmt).render(geometry_of(("A", "B", 12000))))
        titles = [t.text for t in root.iter(f"{SVG_NS}title")]
        assert "A → B: 12,000" in titles


class TestSubtitle:
    def test_subtitle_under_title(self):
        svg = SvgRenderer(title="Energy", subtitle="2024, TWh").render(geometry_of(("A", "B", 1)))
        root = parse(svg)
        subtitle = next(t for t in root.iter(f"{SVG_NS}text") if t.get("class") == "sankey-subtitle")
        assert subtitle.text == "2024, TWh"

    def test_subtitle_grows_header(self):
        geo = geometry_of(("A", "B", 1))
        plain = parse(SvgRenderer(title="Energy").render(geo))
        with_sub = parse(SvgRenderer(title="Energy", subtitle="2024").render(geo))
        assert int(with_sub.get("height")) > int(plain.get("height"))

    def test_subtitle_needs_title(self):
        root = parse(SvgRenderer(subtitle="orphan").render(geometry_of(("A", "B", 1))))
        assert all(t.get("class") != "sankey-subtitle" for t in root.iter(f"{SVG_NS}text"))


class TestLegend:
    def legend_items(self, root: ET.Element) -> list[ET.Element]:
        return [g for g in root.iter(f"{SVG_NS}g") if g.get("class") == "sankey-legend-item"]

    def test_no_legend_by_default(self):
        root = parse(SvgRenderer().render(geometry_of(("A", "B", 1))))
        assert self.legend_items(root) == []

    def test_one_item_per_node_in_node_color(self):
        root = parse(SvgRenderer(legend=True).render(geometry_of(("A", "B", 3), ("A", "C", 1))))
        items = self.legend_items(root)
        assert [i.find(f"{SVG_NS}text").text for i in items] == ["A", "B", "C"]
        assert [i.find(f"{SVG_NS}rect").get("fill") for i in items] == list(PALETTE[:3])

    def test_legend_values_only_with_format(self):
        fmt = NumberFormat(thousands=True)
        root = parse(SvgRenderer(legend=True, number_format=fmt).render(geometry_of(("A", "B", 1500))))
        labels = [i.find(f"{SVG_NS}text").text for i in self.legend_items(root)]
        assert labels == ["A 1,500", "B 1,500"]

    def test_legend_grows_canvas(self):
        geo = geometry_of(("A", "B", 1))
        plain = parse(SvgRenderer().render(geo))
        with_legend = parse(SvgRenderer(legend=True).render(geo))
        assert int(with_legend.get("height")) > int(plain.get("height"))

    def test_legend_wraps_long_lists(self):
        rows = [("Source", f"Target number {i}", 1) for i in range(12)]
        root = parse(SvgRenderer(legend=True).render(geometry_of(*rows)))
        ys = {float(i.find(f"{SVG_NS}text").get("y")) for i in self.legend_items(root)}
        assert len(ys) > 1
