import numpy as np
import pytest

from stickercut.config import StickerConfig
from stickercut.pipeline import StickerSheetPipeline
from stickercut.utils import Rect

from conftest import BLUE, GREEN, RED


@pytest.fixture
def pipeline(counter_ids):
    return StickerSheetPipeline(StickerConfig(), id_generator=counter_ids)


def test_three_separate_stickers(make_sheet, pipeline):
    sheet = make_sheet(80, 200)
    for x, color in zip((10, 80, 150), (RED, BLUE, GREEN)):
        sheet.paint(x, 25, 30, 30, color)

    messages = []
    stickers = pipeline.run(sheet.pixels, progress=messages.append)

    assert [s.name for s in stickers] == ["sticker_1", "sticker_2", "sticker_3"]
    assert len({s.id for s in stickers}) == 3
    assert [s.source_offset_x for s in stickers] == [8, 78, 148]
    assert all(s.source_offset_y == 23 for s in stickers)
    assert all((s.width, s.height) == (46, 46) for s in stickers)
    assert messages == [
        "Scanning image for content...",
        "Detected 3 components. Grouping...",
        "Identified 3 stickers. Extracting...",
    ]


def test_blank_sheet_returns_nothing(make_sheet, pipeline):
    messages = []
    assert pipeline.run(make_sheet(64, 64).pixels, progress=messages.append) == []
    assert messages[-1] == "Identified 0 stickers. Extracting..."


def test_speech_bubble_joins_its_character(make_sheet, pipeline):
    sheet = make_sheet(120, 120)
    sheet.paint(30, 10, 40, 12, BLUE)  # bubble, rows 10..21
    sheet.paint(35, 30, 30, 30, RED)  # character, 8 blank rows below the bubble
    sheet.paint(30, 95, 20, 20, GREEN)  # far away

    stickers = pipeline.run(sheet.pixels)

    assert pipeline.last_raw_rects == [Rect(30, 69, 10, 21), Rect(35, 64, 30, 59), Rect(30, 49, 95, 114)]
    assert pipeline.last_rects == [Rect(30, 69, 10, 59), Rect(30, 49, 95, 114)]
    assert len(stickers) == 2
    assert stickers[0].width == 40 + 4 + 12
    assert stickers[0].height == 50 + 4 + 12


def test_stickers_follow_scan_order(make_sheet, pipeline):
    sheet = make_sheet(150, 150).paint(10, 90, 30, 30, RED).paint(100, 10, 30, 30, BLUE)
    stickers = pipeline.run(sheet.pixels)
    assert [s.source_offset_x for s in stickers] == [98, 8]


def test_rgb_sheet_is_accepted(make_sheet, pipeline):
    sheet = make_sheet(60, 60).paint(15, 15, 20, 20)
    rgb = np.ascontiguousarray(sheet.pixels[..., :3])
    assert len(pipeline.run(rgb)) == 1


def test_progress_is_optional(make_sheet, pipeline):
    sheet = make_sheet(60, 60).paint(15, 15, 20, 20)
    assert len(pipeline.run(sheet.pixels)) == 1


def test_manual_extraction_skips_detection(make_sheet, pipeline):
    sheet = make_sheet(60, 60).paint(10, 10, 3, 3)  # too small to be detected
    assert pipeline.run(sheet.pixels) == []

    sticker = pipeline.extract_manual(sheet.pixels, Rect(5, 20, 5, 20), existing_count=4)
    assert sticker is not None
    assert sticker.name == "sticker_5"
    assert (sticker.source_offset_x, sticker.source_offset_y) == (3, 3)


def test_manual_extraction_outside_the_image(make_sheet, pipeline):
    sheet = make_sheet(50, 50)
    assert pipeline.extract_manual(sheet.pixels, Rect(100, 110, 100, 110)) is None


def test_default_name_comes_from_config(make_sheet, counter_ids):
    config = StickerConfig()
    config.ai.default_name = "emote"
    sheet = make_sheet(60, 60).paint(15, 15, 20, 20)
    stickers = StickerSheetPipeline(config, id_generator=counter_ids).run(sheet.pixels)
    assert stickers[0].name == "emote_1"
