from __future__ import annotations

import itertools

import numpy as np
import pytest

WHITE = (255, 255, 255, 255)
RED = (220, 30, 40, 255)
BLUE = (30, 60, 200, 255)
GREEN = (40, 170, 60, 255)


class Sheet:
    """Synthetic RGBA sheet for tests."""

    def __init__(self, height: int, width: int, color=WHITE) -> None:
        self.pixels = np.empty((height, width, 4), dtype=np.uint8)
        self.pixels[...] = color

    def paint(self, x: int, y: int, w: int, h: int, color=RED) -> "Sheet":
        self.pixels[y : y + h, x : x + w] = color
        return self


@pytest.fixture
def make_sheet():
    def _make(height: int, width: int, color=WHITE) -> Sheet:
        return Sheet(height, width, color)

    return _make


@pytest.fixture
def counter_ids():
    """Deterministic id generator: ``id-1``, ``id-2``, ..."""

    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"
