"""Tests for section geometry extraction."""

import pytest

from processing.pagination import (
    GeometryNode,
    GeometrySourceMissing,
    dom_to_raster_scale,
    extract_sections,
    sections_from_manifest,
)


def node(top, height, tag="section", force=False):
    return GeometryNode(tag=tag, force_break_before=force, dom_top=top, dom_height=height)


class TestExtractSections:
    def test_scales_tops_and_heights_uniformly(self):
        nodes = [node(0, 100, tag="header"), node(100, 50)]
        sections = extract_sections(nodes, dom_surface_height=150, raster_surface_height=450)

        assert [(s.top, s.height) for s in sections] == [(0, 300), (300, 150)]
        assert sections[0].bottom == sections[1].top

    def test_single_ratio_from_total_heights(self):
        nodes = [node(i * 7.0, 7.0) for i in range(100)]
        sections = extract_sections(nodes, dom_surface_height=700, raster_surface_height=2101)

        scale = 2101 / 700
        for index, section in enumerate(sections):
            assert section.top == pytest.approx(index * 7.0 * scale)
            assert section.height == pytest.approx(7.0 * scale)
        assert sections[-1].bottom == pytest.approx(2101)

    def test_zero_height_node_kept(self):
        sections = extract_sections([node(0, 10), node(10, 0), node(10, 5)], 15, 30)

        assert len(sections) == 3
        assert sections[1].height == 0
        assert sections[1].top == 20

    def test_force_break_flags_preserved(self):
        sections = extract_sections([node(0, 10), node(10, 10, tag="subsection", force=True)], 20, 20)
        assert [s.force_break_before for s in sections] == [False, True]

    def test_output_ordered_by_top(self):
        sections = extract_sections([node(50, 10), node(0, 50), node(50, 0)], 60, 120)

        tops = [s.top for s in sections]
        assert tops == sorted(tops)
        # Equal tops keep document order
        assert [s.height for s in sections] == [100, 20, 0]

    def test_empty_input_yields_empty_list(self):
        assert extract_sections([], dom_surface_height=0, raster_surface_height=0) == []

    @pytest.mark.parametrize("dom_height, raster_height", [(0, 100), (-5, 100), (100, 0)])
    def test_missing_surface_raises(self, dom_height, raster_height):
        with pytest.raises(GeometrySourceMissing):
            extract_sections([node(0, 10)], dom_height, raster_height)


class TestDomToRasterScale:
    def test_ratio(self):
        assert dom_to_raster_scale(200, 600) == 3

    def test_zero_dom_height(self):
        with pytest.raises(GeometrySourceMissing):
            dom_to_raster_scale(0, 600)


class TestSectionsFromManifest:
    def test_reads_manifest_dicts(self):
        manifest = [
            {"tag": "header", "forceBreakBefore": False, "domTop": 0, "domHeight": 40},
            {"tag": "section", "forceBreakBefore": True, "domTop": 40, "domHeight": 60},
        ]
        sections = sections_from_manifest(manifest, 100, 300)

        assert [(s.top, s.height, s.force_break_before) for s in sections] == [
            (0, 120, False),
            (120, 180, True),
        ]

    def test_missing_key_rejected(self):
        with pytest.raises(ValueError, match="domHeight"):
            sections_from_manifest([{"tag": "section", "domTop": 0}], 100, 300)

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValueError, match="Unknown geometry tag"):
            sections_from_manifest([{"tag": "footer", "domTop": 0, "domHeight": 5}], 100, 300)
