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

"""Input/output helpers.

Pixel buffers inside the package are RGBA ``uint8`` arrays; OpenCV's BGR(A)
ordering only appears at the file/byte boundary handled here.
"""

from __future__ import annotations

import base64
import binascii
import re
from pathlib import Path
from typing import List, Tuple

import cv2 as cv
import numpy as np


_IMAGE_PATTERNS = ("*.png", "*.jpg", "*.jpeg", "*.webp", "*.bmp", "*.tif", "*.tiff")
_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?:;[\w=-]+)*;base64,(?P<data>.*)$", re.DOTALL)


def collect_images(path: Path) -> List[Path]:
    """Return sorted image paths under ``path`` (supports individual files)."""

    if path.is_file():
        return [path]
    if not path.exists():
        raise FileNotFoundError(f"Input path does not exist: {path}")
    files: List[Path] = []
    for pattern in _IMAGE_PATTERNS:
        files.extend(path.glob(pattern))
    files.sort(key=lambda p: (_extract_index(p.stem), p.stem))
    return files


def _extract_index(name: str) -> int:
    match = re.search(r"(\d+)", name)
    return int(match.group(1)) if match else 0


def as_rgba(image: np.ndarray) -> np.ndarray:
    """Return ``image`` as a contiguous RGBA ``uint8`` array.

    Grayscale and RGB inputs are treated as fully opaque.
    """

    if image.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {image.dtype}")
    if image.ndim == 2:
        return cv.cvtColor(image, cv.COLOR_GRAY2RGBA)
    if image.ndim == 3 and image.shape[2] == 3:
        return cv.cvtColor(image, cv.COLOR_RGB2RGBA)
    if image.ndim == 3 and image.shape[2] == 4:
        return np.ascontiguousarray(image)
    raise ValueError(f"Unsupported pixel layout: shape={image.shape}")


def _bgr_to_rgba(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv.cvtColor(image, cv.COLOR_GRAY2RGBA)
    if image.shape[2] == 4:
        return cv.cvtColor(image, cv.COLOR_BGRA2RGBA)
    return cv.cvtColor(image, cv.COLOR_BGR2RGBA)


def load_image(path: Path) -> np.ndarray:
    """Load an image from disk as RGBA and raise a descriptive error on failure."""

    image = cv.imread(str(path), cv.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Failed to load image: {path}")
    if image.dtype != np.uint8:
        image = cv.convertScaleAbs(image, alpha=255.0 / 65535.0)
    return _bgr_to_rgba(image)


def decode_image_bytes(payload: bytes) -> np.ndarray:
    """Decode encoded image bytes (PNG, JPEG, ...) into an RGBA array."""

    buffer = np.frombuffer(payload, dtype=np.uint8)
    image = cv.imdecode(buffer, cv.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError("Could not decode image bytes")
    return _bgr_to_rgba(image)


def encode_png(pixels: np.ndarray) -> bytes:
    ok, encoded = cv.imencode(".png", cv.cvtColor(as_rgba(pixels), cv.COLOR_RGBA2BGRA))
    if not ok:
        raise RuntimeError("Failed to encode PNG")
    return encoded.tobytes()


def encode_data_url(payload: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


def split_data_url(data_url: str) -> Tuple[str, str]:
    """Return ``(mime_type, base64_data)``; bare base64 strings are treated as PNG."""

    match = _DATA_URL_RE.match(data_url.strip())
    if match is None:
        return "image/png", data_url.strip()
    return match.group("mime") or "image/png", match.group("data")


def decode_data_url(data_url: str) -> bytes:
    _, data = split_data_url(data_url)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 image payload: {exc}") from exc


def ensure_dir(path: Path) -> Path:
    """Create ``path`` (and parents) if needed and return it for chaining."""

    path.mkdir(parents=True, exist_ok=True)
    return path
