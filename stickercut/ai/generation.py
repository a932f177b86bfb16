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

"""Sticker sheet generation from a reference character image."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from google.genai import errors as genai_errors

from ..domain import StickerStyle, build_sticker_prompt
from ..io_utils import encode_data_url
from .client import GeminiClient, GenerationError, MissingCredentialError, image_part, iter_response_parts, text_part

logger = logging.getLogger(__name__)


def generate_sticker_sheet(
    reference_image: str,
    style: StickerStyle,
    client: GeminiClient,
    model: str,
    custom_style: Optional[str] = None,
) -> str:
    """Return the generated sheet as a data URL.

    ``reference_image`` may be a data URL or bare base64. Raises
    :class:`MissingCredentialError` without a key and :class:`GenerationError`
    when the request fails or no image comes back. Nothing is retried.
    """

    if not client.has_credentials:
        raise MissingCredentialError("API key is not set")

    prompt = build_sticker_prompt(style, custom_style)
    try:
        response = client.generate_content(model, [image_part(reference_image), text_part(prompt)])
    except (genai_errors.APIError, httpx.HTTPError) as exc:
        logger.error("Sticker generation request failed: %s", exc)
        raise GenerationError(f"Sticker generation request failed: {exc}") from exc

    for part in iter_response_parts(response):
        inline = part.inline_data
        if inline is not None and inline.data:
            return encode_data_url(inline.data, inline.mime_type or "image/png")

    raise GenerationError("No image returned from generation")
