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

"""Sticker sheet segmentation and extraction."""

from .config import (
    AIConfig,
    BackgroundConfig,
    DetectionConfig,
    ExtractionConfig,
    StickerConfig,
    load_config_overrides_from_file,
    load_sticker_config,
)
from .domain import STICKER_STYLES, StickerStyle, build_sticker_prompt, get_style, normalise_sticker_name
from .export import save_sticker_directory, unique_filenames, write_sticker_archive
from .extraction import StickerExtractor, StickerResult
from .pipeline import StickerSheetPipeline
from .segmentation import ComponentDetector, merge_rects
from .utils import Rect

__all__ = [
    "AIConfig",
    "BackgroundConfig",
    "DetectionConfig",
    "ExtractionConfig",
    "StickerConfig",
    "load_config_overrides_from_file",
    "load_sticker_config",
    "STICKER_STYLES",
    "StickerStyle",
    "build_sticker_prompt",
    "get_style",
    "normalise_sticker_name",
    "save_sticker_directory",
    "unique_filenames",
    "write_sticker_archive",
    "StickerExtractor",
    "StickerResult",
    "StickerSheetPipeline",
    "ComponentDetector",
    "merge_rects",
    "Rect",
]
