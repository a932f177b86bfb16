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

"""Grouping of nearby component rectangles into whole stickers."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..utils import Rect


def is_close(a: Rect, b: Rect, distance: int) -> bool:
    """``True`` when both the X and the Y gap between ``a`` and ``b`` are below ``distance``."""

    gap_x, gap_y = a.gap_to(b)
    return gap_x < distance and gap_y < distance


def _merge_pass(rects: Sequence[Rect], distance: int) -> Tuple[List[Rect], bool]:
    merged: List[Rect] = []
    absorbed = [False] * len(rects)
    changed = False
    for i, seed in enumerate(rects):
        if absorbed[i]:
            continue
        absorbed[i] = True
        current = seed
        for j in range(i + 1, len(rects)):
            if absorbed[j]:
                continue
            # ``current`` keeps growing, so later candidates are tested against the union.
            if is_close(current, rects[j], distance):
                current = current.union(rects[j])
                absorbed[j] = True
                changed = True
        merged.append(current)
    return merged, changed


def merge_rects(rects: Sequence[Rect], distance: int) -> List[Rect]:
    """Union rectangles closer than ``distance`` pixels on both axes until nothing changes.

    Merging is transitive: chains of close rectangles collapse into one. The
    input sequence is left untouched.
    """

    merged = list(rects)
    changed = True
    while changed:
        merged, changed = _merge_pass(merged, distance)
    return merged
