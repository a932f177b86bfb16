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

"""Cut a single sticker from a hand-picked rectangle of a sheet."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

from stickercut import Rect, StickerSheetPipeline, load_config_overrides_from_file, load_sticker_config
from stickercut.export import safe_stem
from stickercut.io_utils import ensure_dir, load_image


def _next_index(directory: Path) -> int:
    if not directory.exists():
        return 0
    return len(list(directory.glob("*.png")))


def run_crop(
    input_path: Union[str, Path],
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    name: Optional[str] = None,
    config: Optional[Mapping[str, object]] = None,
) -> Optional[Path]:
    """
    Extract the sticker inside the rectangle spanned by two corners.

    Detection and merging are skipped; the rectangle is used as-is. The sticker
    is added next to the ones already cut from the same sheet.

    Args:
        input_path: Sheet image
        x0, y0, x1, y1: Opposite corners of the selection, in sheet pixels
        name: File stem; defaults to ``sticker_<N+1>`` for N existing stickers
        config: Optional configuration dictionary to override defaults

    Returns:
        Path of the written PNG, or ``None`` when the selection lies outside the sheet
    """
    overrides = dict(config or {})
    sticker_cfg = load_sticker_config(overrides, base_path=Path.cwd())
    pipeline = StickerSheetPipeline(sticker_cfg)

    sheet = Path(input_path)
    image = load_image(sheet)
    output_dir = sticker_cfg.sheet_output_dir(sheet.stem)

    sticker = pipeline.extract_manual(image, Rect.from_corners(x0, y0, x1, y1), _next_index(output_dir))
    if sticker is None:
        return None
    if name:
        sticker.name = safe_stem(name)

    target = ensure_dir(output_dir) / f"{sticker.name}.png"
    counter = 1
    while target.exists():
        target = output_dir / f"{sticker.name}_{counter}.png"
        counter += 1
    target.write_bytes(sticker.png_bytes())
    return target


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Cut one sticker from a manual selection")
    parser.add_argument("input", type=str, help="Sheet image")
    parser.add_argument("box", type=int, nargs=4, metavar=("X0", "Y0", "X1", "Y1"), help="Selection corners")
    parser.add_argument("--name", type=str, default=None, help="Output file stem")
    parser.add_argument("--config", type=str, default=None, help="Optional config overrides file")
    args = parser.parse_args()

    overrides = None
    if args.config:
        try:
            overrides = load_config_overrides_from_file(args.config)
        except FileNotFoundError:
            print(f"Config overrides not found: {args.config}")
        except Exception as exc:
            print(f"Failed to parse overrides {args.config}: {exc}")

    written = run_crop(args.input, *args.box, name=args.name, config=overrides)
    if written is None:
        print("Selection is outside the sheet; nothing written.")
    else:
        print(f"Saved {written}")
