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

"""Packaging of finished stickers as PNG files or a zip archive."""

from __future__ import annotations

import re
import zipfile
from pathlib import Path
from typing import Iterable, List, Sequence

from .extraction import StickerResult
from .io_utils import ensure_dir

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def safe_stem(name: str, fallback: str = "sticker") -> str:
    """Turn ``name`` into a file stem without path separators or reserved characters."""

    stem = _UNSAFE_CHARS.sub("_", name or "").strip(" .")
    return stem or fallback


def unique_filenames(names: Iterable[str]) -> List[str]:
    """De-duplicate ``names`` in order by appending ``_1``, ``_2``, ... to repeats."""

    used = set()
    unique: List[str] = []
    for name in names:
        base = safe_stem(name)
        candidate = base
        counter = 1
        while candidate in used:
            candidate = f"{base}_{counter}"
            counter += 1
        used.add(candidate)
        unique.append(candidate)
    return unique


def write_sticker_archive(stickers: Sequence[StickerResult], path: Path) -> List[str]:
    """Write every sticker as ``<name>.png`` into the zip at ``path``; return the member names."""

    path.parent.mkdir(parents=True, exist_ok=True)
    members = [f"{stem}.png" for stem in unique_filenames(s.name for s in stickers)]
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for member, sticker in zip(members, stickers):
            archive.writestr(member, sticker.png_bytes())
    return members


def save_sticker_directory(stickers: Sequence[StickerResult], directory: Path) -> List[str]:
    """Write every sticker as a loose ``<name>.png`` under ``directory``; return the file names."""

    ensure_dir(directory)
    files = [f"{stem}.png" for stem in unique_filenames(s.name for s in stickers)]
    for filename, sticker in zip(files, stickers):
        (directory / filename).write_bytes(sticker.png_bytes())
    return files
