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

"""High-level pipeline orchestration."""

from __future__ import annotations

from typing import Callable, List, Optional

import numpy as np

from .config import StickerConfig
from .extraction import StickerExtractor, StickerResult
from .identifiers import IdGenerator
from .io_utils import as_rgba
from .segmentation import ComponentDetector, merge_rects
from .utils import Rect

ProgressCallback = Callable[[str], None]


def _ignore_progress(message: str) -> None:
    return None


class StickerSheetPipeline:
    def __init__(self, config: StickerConfig, id_generator: Optional[IdGenerator] = None) -> None:
        self.config = config
        self.detector = ComponentDetector(config.detection, config.background)
        self.extractor = StickerExtractor(
            config.extraction,
            background=config.background,
            method=config.detection.method,
            id_generator=id_generator,
        )
        self.last_raw_rects: List[Rect] = []
        self.last_rects: List[Rect] = []

    def run(self, image: np.ndarray, progress: Optional[ProgressCallback] = None) -> List[StickerResult]:
        """Cut every sticker out of ``image``.

        An empty list means nothing was detected, which usually points at a
        sheet whose background is not white.
        """

        report = progress or _ignore_progress
        pixels = as_rgba(image)

        report("Scanning image for content...")
        raw_rects = self.detector.detect(pixels)
        self.last_raw_rects = raw_rects

        report(f"Detected {len(raw_rects)} components. Grouping...")
        rects = merge_rects(raw_rects, self.config.detection.merge_distance)
        self.last_rects = rects

        report(f"Identified {len(rects)} stickers. Extracting...")
        results: List[StickerResult] = []
        for index, rect in enumerate(rects, start=1):
            sticker = self.extractor.extract(pixels, rect, f"{self.config.ai.default_name}_{index}")
            if sticker is not None:
                results.append(sticker)
        return results

    def extract_manual(self, image: np.ndarray, rect: Rect, existing_count: int = 0) -> Optional[StickerResult]:
        """Extract a user-drawn rectangle directly, bypassing detection and merging."""

        name = f"{self.config.ai.default_name}_{existing_count + 1}"
        return self.extractor.extract(as_rgba(image), rect, name)
