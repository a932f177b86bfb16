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

"""Background classification and 4-connected flood fills.

Two labeling strategies are provided and produce identical results:

* ``"opencv"`` delegates to ``cv.connectedComponentsWithStats``;
* ``"flood"`` is a pure-Python scan with an explicit stack.

Neither recurses, so arbitrarily large regions cannot exhaust the call stack.
"""

from __future__ import annotations

from typing import List, Tuple

import cv2 as cv
import numpy as np

# (min_x, max_x, min_y, max_y, pixel_count)
ComponentStats = Tuple[int, int, int, int, int]

_METHODS = ("opencv", "flood")


def background_mask(pixels: np.ndarray, alpha_threshold: int = 20, white_threshold: int = 240) -> np.ndarray:
    """Return a boolean mask that is ``True`` where ``pixels`` (RGBA) is background."""

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an RGBA array, got shape={pixels.shape}")
    rgb = pixels[..., :3]
    alpha = pixels[..., 3]
    near_white = np.all(rgb > white_threshold, axis=-1)
    return (alpha < alpha_threshold) | near_white


def is_background_pixel(r: int, g: int, b: int, a: int, alpha_threshold: int = 20, white_threshold: int = 240) -> bool:
    if a < alpha_threshold:
        return True
    return r > white_threshold and g > white_threshold and b > white_threshold


def _check_method(method: str) -> str:
    method = (method or "opencv").strip().lower()
    if method not in _METHODS:
        raise ValueError(f"Unknown labeling method: {method}")
    return method


def label_components(foreground: np.ndarray, method: str = "opencv") -> List[ComponentStats]:
    """Return bounds and size of every 4-connected ``True`` region of ``foreground``.

    Regions are listed in row-major discovery order, i.e. sorted by the raster
    position of their first pixel.
    """

    if _check_method(method) == "flood":
        return _label_with_stack(foreground)
    return _label_with_opencv(foreground)


def _label_with_opencv(foreground: np.ndarray) -> List[ComponentStats]:
    mask = foreground.astype(np.uint8)
    if mask.size == 0 or not mask.any():
        return []
    _, labels, stats, _ = cv.connectedComponentsWithStats(mask, connectivity=4)
    # Label numbering is an implementation detail of OpenCV; reorder by first pixel.
    present, first_index = np.unique(labels.ravel(), return_index=True)
    order = sorted(
        (int(first), int(label)) for label, first in zip(present, first_index) if label != 0
    )
    components: List[ComponentStats] = []
    for _, label in order:
        left = int(stats[label, cv.CC_STAT_LEFT])
        top = int(stats[label, cv.CC_STAT_TOP])
        width = int(stats[label, cv.CC_STAT_WIDTH])
        height = int(stats[label, cv.CC_STAT_HEIGHT])
        area = int(stats[label, cv.CC_STAT_AREA])
        components.append((left, left + width - 1, top, top + height - 1, area))
    return components


def _label_with_stack(foreground: np.ndarray) -> List[ComponentStats]:
    height, width = foreground.shape[:2]
    flat = foreground.astype(bool).ravel().tolist()
    visited = bytearray(width * height)
    components: List[ComponentStats] = []

    for start in range(width * height):
        if visited[start] or not flat[start]:
            continue
        visited[start] = 1
        stack = [start]
        min_x = max_x = start % width
        min_y = max_y = start // width
        count = 0
        while stack:
            idx = stack.pop()
            cy, cx = divmod(idx, width)
            if cx < min_x:
                min_x = cx
            elif cx > max_x:
                max_x = cx
            if cy < min_y:
                min_y = cy
            elif cy > max_y:
                max_y = cy
            count += 1
            if cx > 0 and not visited[idx - 1] and flat[idx - 1]:
                visited[idx - 1] = 1
                stack.append(idx - 1)
            if cx < width - 1 and not visited[idx + 1] and flat[idx + 1]:
                visited[idx + 1] = 1
                stack.append(idx + 1)
            if cy > 0 and not visited[idx - width] and flat[idx - width]:
                visited[idx - width] = 1
                stack.append(idx - width)
            if cy < height - 1 and not visited[idx + width] and flat[idx + width]:
                visited[idx + width] = 1
                stack.append(idx + width)
        components.append((min_x, max_x, min_y, max_y, count))
    return components


def exterior_mask(background: np.ndarray, method: str = "opencv") -> np.ndarray:
    """Mark background pixels reachable from the border through background pixels.

    Background enclosed by foreground (e.g. a white highlight inside an eye) is
    left unmarked.
    """

    if _check_method(method) == "flood":
        return _exterior_with_stack(background)
    return _exterior_with_opencv(background)


def _border_values(array: np.ndarray) -> np.ndarray:
    return np.concatenate([array[0, :], array[-1, :], array[:, 0], array[:, -1]])


def _exterior_with_opencv(background: np.ndarray) -> np.ndarray:
    mask = background.astype(np.uint8)
    if mask.size == 0 or not mask.any():
        return np.zeros(background.shape[:2], dtype=bool)
    _, labels = cv.connectedComponents(mask, connectivity=4)
    border_labels = np.unique(_border_values(labels))
    border_labels = border_labels[border_labels != 0]
    return np.isin(labels, border_labels)


def _exterior_with_stack(background: np.ndarray) -> np.ndarray:
    height, width = background.shape[:2]
    exterior = np.zeros((height, width), dtype=bool)
    if height == 0 or width == 0:
        return exterior
    flat = background.astype(bool).ravel().tolist()
    marked = bytearray(width * height)

    stack: List[int] = []
    for x in range(width):
        stack.append(x)
        stack.append((height - 1) * width + x)
    for y in range(1, height - 1):
        stack.append(y * width)
        stack.append(y * width + width - 1)

    while stack:
        idx = stack.pop()
        if marked[idx] or not flat[idx]:
            continue
        marked[idx] = 1
        cy, cx = divmod(idx, width)
        if cx > 0:
            stack.append(idx - 1)
        if cx < width - 1:
            stack.append(idx + 1)
        if cy > 0:
            stack.append(idx - width)
        if cy < height - 1:
            stack.append(idx + width)

    return np.frombuffer(bytes(marked), dtype=np.uint8).astype(bool).reshape(height, width)
