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

"""Connected-component detection of drawn elements on a near-white sheet."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from ..config import BackgroundConfig, DetectionConfig
from ..io_utils import as_rgba
from ..utils import Rect
from .background import ComponentStats, background_mask, label_components

logger = logging.getLogger(__name__)


class ComponentDetector:
    """Finds the bounding rectangle of every non-background region large enough to keep."""

    def __init__(self, config: DetectionConfig, background: Optional[BackgroundConfig] = None) -> None:
        self.config = config
        self.background = background or BackgroundConfig()

    def foreground(self, pixels: np.ndarray) -> np.ndarray:
        mask = background_mask(
            as_rgba(pixels),
            alpha_threshold=self.background.alpha_threshold,
            white_threshold=self.background.white_threshold,
        )
        return ~mask

    def _keep(self, component: ComponentStats) -> bool:
        min_x, max_x, min_y, max_y, count = component
        # Extent is max minus min; anything at or below the limit is an anti-aliasing speck.
        return (
            count > self.config.min_pixel_count
            and (max_x - min_x) > self.config.min_extent
            and (max_y - min_y) > self.config.min_extent
        )

    def detect(self, pixels: np.ndarray) -> List[Rect]:
        """Return raw rectangles in row-major discovery order; ``[]`` when nothing is found."""

        components = label_components(self.foreground(pixels), self.config.method)
        rects = [
            Rect(min_x=c[0], max_x=c[1], min_y=c[2], max_y=c[3])
            for c in components
            if self._keep(c)
        ]
        logger.debug("Kept %d of %d connected components", len(rects), len(components))
        return rects
