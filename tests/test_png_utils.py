import pytest
from PIL import Image, ImageChops

from config import LINE_HEIGHT, PAGE_WIDTH, STATIC_LABELS
from png_utils import (
    Segment,
    SegmentCanvas,
    encode_png,
    max_segment_height,
    measure_bold_text,
    measure_text,
    plan_segments,
    render_full_image,
    render_segments,
    save_segment_pngs,
)
from summary_layout import LayoutOffsets, SummaryLayout, build_summary_model, plan_summary


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture(name="layout")
def layout_fixture(two_ticket_payload):
    model = build_summary_model(two_ticket_payload.tickets)
    return plan_summary(model, measure_text, bold_measure=measure_bold_text)


def _synthetic_layout(height=40000, offsets=LayoutOffsets(200, 231, 39000, 39031)):
    return SummaryLayout(width=PAGE_WIDTH, height=height, line_height=LINE_HEIGHT, offsets=offsets, items=[])


class TestPlanSegments:
    def test_max_segment_height(self):
        assert max_segment_height(1080) == 15534
        assert 1080 * 15534 <= 16_777_216 < 1080 * 15535

    def test_short_layout_is_one_segment(self):
        layout = _synthetic_layout(height=3000, offsets=LayoutOffsets(200, 231, 2500, 2531))
        assert plan_segments(layout) == [Segment(start=0, height=3000)]

    def test_tall_layout_cuts_on_row_boundaries(self):
        layout = _synthetic_layout()
        segments = plan_segments(layout)
        assert [segment.start for segment in segments] == [0, 15499, 31031]
        assert sum(segment.height for segment in segments) == 40000
        assert segments[-1].end == 40000
        for segment in segments[1:]:
            assert (segment.start - 231) % LINE_HEIGHT == 0

    def test_every_segment_fits_under_cap(self):
        layout = _synthetic_layout()
        for segment in plan_segments(layout):
            assert layout.width * segment.height <= 16_777_216

    def test_cut_outside_list_zone_is_not_aligned(self):
        layout = _synthetic_layout(height=20000, offsets=LayoutOffsets(200, 231, 1000, 1031))
        assert [segment.start for segment in plan_segments(layout)] == [0, 15534]

    def test_cap_smaller_than_one_row(self):
        with pytest.raises(ValueError):
            plan_segments(_synthetic_layout(), cap=PAGE_WIDTH - 1)


class TestRendering:
    def test_segments_stitch_into_full_image(self, layout):
        cap = layout.width * 400
        segments = plan_segments(layout, cap)
        assert len(segments) > 2

        stitched = Image.new("RGB", (layout.width, layout.height))
        for segment, image in zip(segments, render_segments(layout, cap)):
            assert image.size == (layout.width, segment.height)
            stitched.paste(image, (0, segment.start))

        full = render_full_image(layout)
        assert full.size == (layout.width, layout.height)
        assert ImageChops.difference(full, stitched).getbbox() is None

    def test_list_zone_cuts_fall_between_rows(self, layout):
        offsets = layout.offsets
        for segment in plan_segments(layout, layout.width * 400)[1:]:
            if offsets.list_start < segment.start < offsets.list_end:
                assert (segment.start - offsets.list_start) % LINE_HEIGHT == 0

    def test_encode_png(self, layout):
        assert encode_png(render_full_image(layout)).startswith(PNG_SIGNATURE)

    def test_save_segment_pngs(self, layout, tmp_path):
        cap = layout.width * 600
        paths = save_segment_pngs(layout, tmp_path / "strips", "preview", cap)
        assert len(paths) == len(plan_segments(layout, cap))
        assert paths[0].name == "preview_part01.png"
        assert all(path.read_bytes().startswith(PNG_SIGNATURE) for path in paths)

    def test_bold_table_cells_drawn_bold(self, layout, monkeypatch):
        drawn = []

        def record(canvas, x, y, text, font_size, color, *, bold=False, anchor="la"):
            drawn.append((text, bold))

        monkeypatch.setattr(SegmentCanvas, "text", record)
        render_full_image(layout)
        assert (STATIC_LABELS["table_hour_label"], True) in drawn
        assert (STATIC_LABELS["table_total_row"], True) in drawn
        assert ("09h", False) in drawn

    def test_unknown_item_is_rejected(self):
        layout = _synthetic_layout(height=400, offsets=LayoutOffsets(100, 131, 131, 131))
        layout.items.append(object())
        with pytest.raises(TypeError):
            render_full_image(layout)


class TestMeasure:
    def test_longer_text_is_wider(self):
        assert measure_text("Japan Pavilion", 26) > measure_text("Japan", 26) > 0

    def test_larger_font_is_wider(self):
        assert measure_text("Japan", 40) > measure_text("Japan", 20)
