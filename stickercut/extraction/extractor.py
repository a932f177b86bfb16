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

"""Cut a single sticker out of a sheet and give it a white outline."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..config import BackgroundConfig, ExtractionConfig
from ..identifiers import IdGenerator, default_id_generator
from ..io_utils import as_rgba, decode_data_url, encode_data_url, encode_png
from ..segmentation.background import background_mask, exterior_mask
from ..utils import Rect, crop, pad_rect
from .compositing import alpha_over, place, stamp, to_float_layer, to_uint8_rgba

logger = logging.getLogger(__name__)


@dataclass
class StickerResult:
    id: str
    image: str  # PNG data URL
    source_offset_x: int
    source_offset_y: int
    width: int
    height: int
    name: str = "sticker"
    naming_in_progress: bool = False
    pixels: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    def png_bytes(self) -> bytes:
        return decode_data_url(self.image)


class StickerExtractor:
    def __init__(
        self,
        config: ExtractionConfig,
        background: Optional[BackgroundConfig] = None,
        method: str = "opencv",
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self.config = config
        self.background = background or BackgroundConfig()
        self.method = method
        self.id_generator = id_generator or default_id_generator()

    def cutout(self, pixels: np.ndarray, region: Rect) -> np.ndarray:
        """Copy ``region`` and make only the background that touches its border transparent."""

        working = crop(pixels, region).copy()
        background = background_mask(
            working,
            alpha_threshold=self.background.alpha_threshold,
            white_threshold=self.background.white_threshold,
        )
        exterior = exterior_mask(background, self.method)
        working[exterior, 3] = 0
        return working

    def outline(self, cutout: np.ndarray) -> np.ndarray:
        """Return ``cutout`` on a canvas grown by the stroke width, surrounded by a uniform stroke."""

        stroke = int(self.config.stroke_width)
        steps = max(1, int(self.config.stroke_steps))
        height, width = cutout.shape[:2]
        canvas_size = (height + 2 * stroke, width + 2 * stroke)

        cut_rgb, cut_alpha = to_float_layer(cutout)

        # The silhouette keeps the cutout's alpha exactly; only the colour is replaced.
        stroke_alpha = np.zeros(canvas_size, dtype=np.float32)
        for i in range(steps):
            angle = (i / steps) * 2.0 * math.pi
            offset_x = stroke + math.cos(angle) * stroke
            offset_y = stroke + math.sin(angle) * stroke
            shifted = stamp(cut_alpha, canvas_size, offset_x, offset_y)
            stroke_alpha = shifted + stroke_alpha * (1.0 - shifted)
        centred = place(cut_alpha, canvas_size, stroke, stroke)
        stroke_alpha = centred + stroke_alpha * (1.0 - centred)

        stroke_rgb = np.empty(canvas_size + (3,), dtype=np.float32)
        stroke_rgb[...] = np.asarray(self.config.stroke_color, dtype=np.float32) / 255.0

        final_rgb, final_alpha = alpha_over(
            stroke_rgb,
            stroke_alpha,
            place(cut_rgb, canvas_size, stroke, stroke),
            centred,
        )
        return to_uint8_rgba(final_rgb, final_alpha)

    def extract(self, source: np.ndarray, rect: Rect, default_name: str = "sticker") -> Optional[StickerResult]:
        """Extract the sticker inside ``rect``; ``None`` when the padded crop is empty."""

        pixels = as_rgba(source)
        height, width = pixels.shape[:2]
        region = pad_rect(rect, int(self.config.padding), width, height)
        if region is None or region.width <= 0 or region.height <= 0:
            logger.debug("Skipping degenerate crop for %s", rect)
            return None

        cutout = self.cutout(pixels, region)
        final = self.outline(cutout)

        return StickerResult(
            id=self.id_generator(),
            image=encode_data_url(encode_png(final)),
            source_offset_x=region.min_x,
            source_offset_y=region.min_y,
            width=int(final.shape[1]),
            height=int(final.shape[0]),
            name=default_name,
            naming_in_progress=False,
            pixels=final,
        )
