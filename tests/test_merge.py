import pytest

from stickercut.segmentation import is_close, merge_rects
from stickercut.utils import Rect


def _square(x, y, size=20):
    return Rect(x, x + size - 1, y, y + size - 1)


def test_gap_is_zero_when_overlapping():
    assert Rect(0, 10, 0, 10).gap_to(Rect(5, 20, 8, 30)) == (0, 0)
    assert Rect(0, 10, 0, 10).gap_to(Rect(25, 30, -40, -20)) == (15, 20)


@pytest.mark.parametrize(
    "distance, expected_count",
    [(15, 1), (12, 1), (11, 0), (5, 0)],
)
def test_diagonal_squares_merge_only_below_threshold(distance, expected_count):
    a = _square(10, 10)
    b = _square(40, 40)  # 10 background pixels between them, gap value 11 on both axes
    assert a.gap_to(b) == (11, 11)
    merged = merge_rects([a, b], distance)
    if expected_count:
        assert merged == [Rect(10, 59, 10, 59)]
    else:
        assert merged == [a, b]


def test_close_on_one_axis_only_does_not_merge():
    a = _square(0, 0)
    b = _square(100, 5)
    assert not is_close(a, b, 15)
    assert merge_rects([a, b], 15) == [a, b]


def test_merging_is_transitive_across_passes():
    a = _square(0, 0)
    c = _square(60, 0)
    bridge = _square(30, 0)  # close to both, listed last
    merged = merge_rects([a, c, bridge], 15)
    assert merged == [Rect(0, 79, 0, 19)]


def test_growing_union_absorbs_later_candidates():
    a = _square(0, 0)
    b = _square(25, 0)
    c = _square(50, 0)
    assert merge_rects([a, b, c], 10) == [Rect(0, 69, 0, 19)]


def test_merge_is_idempotent():
    rects = [_square(0, 0), _square(30, 0), _square(200, 200), _square(100, 10), _square(226, 190)]
    once = merge_rects(rects, 15)
    assert merge_rects(once, 15) == once


def test_input_is_left_untouched():
    rects = [_square(0, 0), _square(25, 0)]
    snapshot = list(rects)
    merge_rects(rects, 15)
    assert rects == snapshot


def test_empty_list():
    assert merge_rects([], 15) == []


def test_invalid_rect_is_rejected():
    with pytest.raises(ValueError):
        Rect(10, 5, 0, 0)
    assert Rect.from_corners(10, 8, 5, 0) == Rect(5, 10, 0, 8)
