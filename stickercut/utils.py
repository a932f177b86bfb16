# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""General-purpose utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in source pixel coordinates, inclusive bounds."""

    min_x: int
    max_x: int
    min_y: int
    max_y: int

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(f"Invalid rectangle bounds: {self.as_tuple()}")

    @classmethod
    def from_corners(cls, x0: int, y0: int, x1: int, y1: int) -> "Rect":
        """Build a rectangle from two opposite corners given in any order."""

        return cls(
            min_x=int(min(x0, x1)),
            max_x=int(max(x0, x1)),
            min_y=int(min(y0, y1)),
            max_y=int(max(y0, y1)),
        )

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.min_x, self.max_x, self.min_y, self.max_y

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    def gap_to(self, other: "Rect") -> Tuple[int, int]:
        """Return the ``(x, y)`` gaps to ``other``; an axis is zero when the spans overlap."""

        gap_x = max(0, other.min_x - self.max_x, self.min_x - other.max_x)
        gap_y = max(0, other.min_y - self.max_y, self.min_y - other.max_y)
        return gap_x, gap_y

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            min_x=min(self.min_x, other.min_x),
            max_x=max(self.max_x, other.max_x),
            min_y=min(self.min_y, other.min_y),
            max_y=max(self.max_y, other.max_y),
        )


def pad_rect(rect: Rect, padding: int, width: int, height: int) -> Optional[Rect]:
    """Grow ``rect`` by ``padding`` on each side and clamp it to a ``width`` x ``height`` image.

    Returns ``None`` when nothing of the padded rectangle lies inside the image.
    """

    x1 = max(0, rect.min_x - padding)
    y1 = max(0, rect.min_y - padding)
    x2 = min(width - 1, rect.max_x + padding)
    y2 = min(height - 1, rect.max_y + padding)
    if x2 < x1 or y2 < y1:
        return None
    return Rect(x1, x2, y1, y2)


def crop(image: np.ndarray, rect: Rect) -> np.ndarray:
    """Return the rectangular crop denoted by ``rect`` (a view, not a copy)."""

    return image[rect.min_y : rect.max_y + 1, rect.min_x : rect.max_x + 1]
