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

"""Configuration helpers for the sticker pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

_COMMENT_AFTER_SPACE = re.compile(r"\s#")


def _strip_inline_comment(value: str, hash_values: bool = False) -> str:
    if "#" not in value:
        return value.strip()
    if hash_values:
        # Values such as ``#RRGGBB``: only a ``#`` preceded by whitespace starts a comment.
        return _COMMENT_AFTER_SPACE.split(value.strip(), 1)[0].strip()
    return value.split("#", 1)[0].strip()


def _parse_override_value(value: str, key: str = "") -> object:
    lowered_key = key.lower()
    text = _strip_inline_comment(value, hash_values="color" in lowered_key)
    if not text:
        return ""
    if "model" in lowered_key or "key" in lowered_key or "url" in lowered_key:
        return text
    lowered = text.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        if any(sep in text for sep in (".", "e", "E")):
            return float(text)
        return int(text)
    except ValueError:
        return text


def load_config_overrides_from_file(path: Union[str, Path], *, allow_missing: bool = False) -> Dict[str, object]:
    """Parse a minimal ``key: value`` override file (no JSON required)."""

    file_path = Path(path)
    if not file_path.exists():
        if allow_missing:
            return {}
        raise FileNotFoundError(f"Config file not found: {file_path}")

    overrides: Dict[str, object] = {}
    with file_path.open("r", encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if ":" not in line:
                continue
            key, value = line.split(":", 1)
            key = key.strip()
            overrides[key] = _parse_override_value(value, key)
    return overrides


@dataclass
class BackgroundConfig:
    """Thresholds of the background predicate (transparent or near-white)."""

    alpha_threshold: int = 20
    white_threshold: int = 240


@dataclass
class DetectionConfig:
    min_pixel_count: int = 50
    min_extent: int = 5
    merge_distance: int = 15
    method: str = "opencv"


@dataclass
class ExtractionConfig:
    padding: int = 2
    stroke_width: int = 6
    stroke_steps: int = 24
    stroke_color: Tuple[int, int, int] = (255, 255, 255)


@dataclass
class AIConfig:
    api_key: Optional[str] = None
    api_key_env: str = "GEMINI_API_KEY"
    base_url: Optional[str] = None
    naming_model: str = "gemini-2.5-flash"
    generation_model: str = "gemini-3-pro-image-preview"
    timeout: float = 120.0
    naming_batch_size: int = 3
    default_name: str = "sticker"


@dataclass
class StickerConfig:
    output_root: Path = Path("output")
    background: BackgroundConfig = field(default_factory=BackgroundConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    ai: AIConfig = field(default_factory=AIConfig)

    def sheet_output_dir(self, stem: str) -> Path:
        return self.output_root / stem


def _pop_first(keys: Iterable[str], source: Dict[str, object], default: object) -> Any:
    for key in keys:
        if key in source:
            return source.pop(key)
    return default


def _ensure_path(value: object, base_path: Path) -> Path:
    path = Path(str(value))
    if not path.is_absolute():
        path = base_path / path
    return path


def _ensure_color(value: object) -> Tuple[int, int, int]:
    if isinstance(value, (tuple, list)):
        channels = [int(v) for v in value]
    else:
        text = str(value).strip()
        if text.startswith("#") and len(text) == 7:
            channels = [int(text[i : i + 2], 16) for i in (1, 3, 5)]
        else:
            channels = [int(token) for token in text.replace(",", " ").split() if token]
    if len(channels) != 3:
        raise ValueError(f"Expected an RGB triple, got: {value!r}")
    return tuple(max(0, min(255, c)) for c in channels)  # type: ignore[return-value]


def load_sticker_config(config_dict: Optional[Dict[str, object]], base_path: Optional[Path] = None) -> StickerConfig:
    data = dict(config_dict or {})
    base = Path(base_path or Path.cwd())

    output_root = _ensure_path(_pop_first(["output_root", "output_dir"], data, "output"), base)

    background = BackgroundConfig(
        alpha_threshold=int(_pop_first(["bg_alpha_threshold", "alpha_threshold"], data, 20)),
        white_threshold=int(_pop_first(["bg_white_threshold", "white_threshold"], data, 240)),
    )

    detection = DetectionConfig(
        min_pixel_count=int(_pop_first(["det_min_pixels", "min_pixel_count"], data, 50)),
        min_extent=int(_pop_first(["det_min_extent", "min_extent"], data, 5)),
        merge_distance=int(_pop_first(["merge_distance", "det_merge_distance"], data, 15)),
        method=str(_pop_first(["det_method", "labeling"], data, "opencv")).strip().lower(),
    )

    extraction = ExtractionConfig(
        padding=int(_pop_first(["ext_padding", "padding"], data, 2)),
        stroke_width=int(_pop_first(["ext_stroke_width", "stroke_width"], data, 6)),
        stroke_steps=int(_pop_first(["ext_stroke_steps", "stroke_steps"], data, 24)),
        stroke_color=_ensure_color(_pop_first(["ext_stroke_color", "stroke_color"], data, (255, 255, 255))),
    )

    api_key_value = _pop_first(["ai_api_key", "api_key"], data, None)
    base_url_value = _pop_first(["ai_base_url"], data, None)
    ai = AIConfig(
        api_key=str(api_key_value) if api_key_value else None,
        api_key_env=str(_pop_first(["ai_api_key_env"], data, "GEMINI_API_KEY")),
        base_url=str(base_url_value) if base_url_value else None,
        naming_model=str(_pop_first(["ai_naming_model", "naming_model"], data, "gemini-2.5-flash")),
        generation_model=str(_pop_first(["ai_generation_model", "generation_model"], data, "gemini-3-pro-image-preview")),
        timeout=float(_pop_first(["ai_timeout"], data, 120.0)),
        naming_batch_size=int(_pop_first(["naming_batch_size", "ai_batch_size"], data, 3)),
        default_name=str(_pop_first(["default_name"], data, "sticker")),
    )

    if detection.method not in {"opencv", "flood"}:
        raise ValueError(f"Unknown labeling method: {detection.method}")
    if extraction.stroke_steps < 1:
        raise ValueError("stroke_steps must be at least 1")

    return StickerConfig(
        output_root=output_root,
        background=background,
        detection=detection,
        extraction=extraction,
        ai=ai,
    )
