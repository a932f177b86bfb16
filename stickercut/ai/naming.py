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

"""Automatic naming of finished stickers with a vision model."""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from google.genai import types

from ..config import AIConfig
from ..domain import NAMING_PROMPT, normalise_sticker_name
from ..extraction import StickerResult
from .client import GeminiClient, image_part, response_text, text_part

logger = logging.getLogger(__name__)

_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={"filename": types.Schema(type=types.Type.STRING)},
)


class StickerNamer:
    """Asks the naming model for a short file name.

    :meth:`name` never raises: any failure yields ``config.default_name``.
    """

    def __init__(self, config: AIConfig, client: Optional[GeminiClient] = None) -> None:
        self.config = config
        self.client = client or GeminiClient.from_config(config)

    def _request(self, image_payload: str) -> str:
        response = self.client.generate_content(
            self.config.naming_model,
            [image_part(image_payload, "image/png"), text_part(NAMING_PROMPT)],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=_RESPONSE_SCHEMA,
            ),
        )
        text = response_text(response)
        if not text:
            return self.config.default_name
        data = json.loads(text)
        filename = data.get("filename") if isinstance(data, dict) else None
        return normalise_sticker_name(filename) or self.config.default_name

    def name(self, image_payload: str) -> str:
        if not self.client.has_credentials:
            logger.warning("API key is not set; skipping AI naming")
            return self.config.default_name
        try:
            return self._request(image_payload)
        except Exception as exc:
            logger.warning("Sticker naming failed: %s", exc)
            return self.config.default_name


def name_stickers(
    stickers: Sequence[StickerResult],
    namer: StickerNamer,
    batch_size: int = 3,
    progress: Optional[Callable[[str], None]] = None,
) -> List[StickerResult]:
    """Name ``stickers`` in place, ``batch_size`` requests at a time.

    Each worker only touches its own result entry.
    """

    items = list(stickers)
    for sticker in items:
        sticker.naming_in_progress = True

    def _name_one(sticker: StickerResult) -> None:
        try:
            sticker.name = namer.name(sticker.image)
        finally:
            sticker.naming_in_progress = False

    size = max(1, int(batch_size))
    completed = 0
    with ThreadPoolExecutor(max_workers=size) as pool:
        for start in range(0, len(items), size):
            batch = items[start : start + size]
            list(pool.map(_name_one, batch))
            completed += len(batch)
            if progress is not None and len(items) > 1:
                progress(f"Naming {completed}/{len(items)}...")
    return items
