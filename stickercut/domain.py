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

"""Domain knowledge for sticker sheets: style presets, prompts, and names."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Dict, Iterable, Optional


@dataclass(frozen=True)
class StickerStyle:
    id: str
    name: str
    description: str


STICKER_STYLES = (
    StickerStyle(
        id="line_cute",
        name="Cute LINE stickers",
        description="Cute cartoon character in two-head-tall proportion, suited to everyday chat",
    ),
    StickerStyle(
        id="chibi_expressive",
        name="Expressive chibi",
        description="Chibi character with exaggerated, emotionally rich expressions",
    ),
    StickerStyle(
        id="kawaii_pastel",
        name="Pastel kawaii",
        description="Soft pastel palette with a dreamy, girlish feel",
    ),
    StickerStyle(
        id="dynamic_action",
        name="Dynamic action",
        description="Lively action poses full of energy",
    ),
)

_STYLES_BY_ID: Dict[str, StickerStyle] = {style.id: style for style in STICKER_STYLES}

DEFAULT_STYLE_ID = "line_cute"

_BASE_PROMPT = (
    "Design a cute cartoon character based on the character in this image and produce "
    "16 LINE stickers. Poses and text layout should be creative, varied and distinctive. "
    "Dialogue should be in {language}, showing the character in different scenes and moods, "
    "in two-head-tall proportion.\n\n"
    "Important: the background must be pure white (#FFFFFF) with no other colours or patterns. "
    "Leave enough space between stickers."
)

NAMING_PROMPT = (
    "Analyze this sticker. Return a JSON object with a 'filename' property containing a short, "
    "descriptive name (max 3 words) in English using snake_case. If there is text, try to capture "
    "the meaning or emotion. Example: 'sad_crying', 'thumbs_up', 'working_hard'."
)

MAX_NAME_WORDS = 3


def get_style(style_id: Optional[str]) -> StickerStyle:
    """Return the preset for ``style_id``; ``None`` selects the default preset."""

    key = (style_id or DEFAULT_STYLE_ID).strip().lower()
    try:
        return _STYLES_BY_ID[key]
    except KeyError:
        known = ", ".join(sorted(_STYLES_BY_ID))
        raise KeyError(f"Unknown sticker style {style_id!r}; expected one of: {known}") from None


def iter_style_ids() -> Iterable[str]:
    return [style.id for style in STICKER_STYLES]


def build_sticker_prompt(
    style: StickerStyle,
    custom_style: Optional[str] = None,
    language: str = "Simplified Chinese",
) -> str:
    """Combine the base generation prompt with a style line.

    A non-blank ``custom_style`` takes priority over the preset description.
    """

    description = custom_style.strip() if custom_style and custom_style.strip() else style.description
    return f"{_BASE_PROMPT.format(language=language)}\nArt style: {description}"


def normalise_sticker_name(text: Optional[str]) -> Optional[str]:
    """Return a lower ``snake_case`` file stem of at most three words, or ``None``.

    Accents are folded to ASCII; anything that is not a letter or digit
    separates words.
    """

    if not text:
        return None
    folded = unicodedata.normalize("NFKD", str(text)).encode("ascii", "ignore").decode("ascii")
    words = [word for word in re.split(r"[^0-9a-zA-Z]+", folded.lower()) if word]
    if not words:
        return None
    return "_".join(words[:MAX_NAME_WORDS])
