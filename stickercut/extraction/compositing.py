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

"""Float32 straight-alpha layer helpers used to build sticker outlines."""

from __future__ import annotations

from typing import Tuple

import cv2 as cv
import numpy as np


def to_float_layer(pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Split RGBA ``uint8`` pixels into ``(rgb, alpha)`` float32 layers in ``[0, 1]``."""

    layer = pixels.astype(np.float32) / 255.0
    return layer[..., :3], layer[..., 3]


def to_uint8_rgba(rgb: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    rgba = np.dstack([rgb, alpha[..., None]])
    return np.clip(np.rint(rgba * 255.0), 0, 255).astype(np.uint8)


def alpha_over(
    dst_rgb: np.ndarray,
    dst_alpha: np.ndarray,
    src_rgb: np.ndarray,
    src_alpha: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Composite ``src`` over ``dst`` (Porter-Duff source-over, straight alpha)."""

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    weighted = src_rgb * src_alpha[..., None] + dst_rgb * (dst_alpha * (1.0 - src_alpha))[..., None]
    safe = np.where(out_alpha > 0.0, out_alpha, 1.0)[..., None]
    out_rgb = np.where(out_alpha[..., None] > 0.0, weighted / safe, 0.0)
    return out_rgb.astype(np.float32), out_alpha.astype(np.float32)


def stamp(layer: np.ndarray, canvas_size: Tuple[int, int], offset_x: float, offset_y: float) -> np.ndarray:
    """Translate a single-channel ``layer`` by a possibly fractional offset onto a blank canvas.

    ``canvas_size`` is ``(height, width)``. Fractional offsets are resampled
    bilinearly; whatever falls outside the canvas is dropped.
    """

    height, width = canvas_size
    matrix = np.array([[1.0, 0.0, offset_x], [0.0, 1.0, offset_y]], dtype=np.float64)
    return cv.warpAffine(
        layer.astype(np.float32),
        matrix,
        (width, height),
        flags=cv.INTER_LINEAR,
        borderMode=cv.BORDER_CONSTANT,
        borderValue=0.0,
    )


def place(layer: np.ndarray, canvas_size: Tuple[int, int], left: int, top: int) -> np.ndarray:
    """Copy ``layer`` onto a zeroed canvas at an integer position."""

    height, width = canvas_size
    canvas = np.zeros((height, width) + layer.shape[2:], dtype=np.float32)
    h, w = layer.shape[:2]
    canvas[top : top + h, left : left + w] = layer
    return canvas
