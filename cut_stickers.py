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

"""Cut every sticker out of one or more sticker sheets."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from stickercut import (
    StickerConfig,
    StickerSheetPipeline,
    load_config_overrides_from_file,
    load_sticker_config,
    save_sticker_directory,
    write_sticker_archive,
)
from stickercut.io_utils import collect_images, ensure_dir, load_image


def _print_progress(message: str) -> None:
    print(f"  {message}")


def _clear_stale_outputs(sheet_dir: Path, archive_path: Path) -> None:
    if sheet_dir.exists():
        shutil.rmtree(sheet_dir)
    archive_path.unlink(missing_ok=True)


def _name_with_ai(stickers, sticker_cfg: StickerConfig) -> None:
    # Imported lazily so that cutting works without network dependencies configured.
    from stickercut.ai import StickerNamer, name_stickers

    namer = StickerNamer(sticker_cfg.ai)
    name_stickers(stickers, namer, batch_size=sticker_cfg.ai.naming_batch_size, progress=_print_progress)


def run_cut(
    input_path: Union[str, Path],
    config: Optional[Mapping[str, object]] = None,
    use_ai_naming: bool = False,
) -> Dict[str, List[str]]:
    """
    Cut stickers out of every sheet found at ``input_path``.

    For each sheet the stickers are written as PNG files to
    ``<output_root>/<sheet stem>/`` and bundled into ``<output_root>/<sheet stem>.zip``.

    Args:
        input_path: A sheet image or a directory of sheets
        config: Optional configuration dictionary to override defaults
        use_ai_naming: Name stickers with the naming model instead of ``sticker_N``

    Returns:
        Dictionary mapping sheet file names to the sticker file names written

    Example:
        >>> summary = run_cut("sheets/cats.png")
        >>> print(summary["cats.png"])
        ['sticker_1.png', 'sticker_2.png', 'sticker_3.png']
    """
    overrides = dict(config or {})
    sticker_cfg = load_sticker_config(overrides, base_path=Path.cwd())
    ensure_dir(sticker_cfg.output_root)
    pipeline = StickerSheetPipeline(sticker_cfg)

    results: Dict[str, List[str]] = {}
    for image_path in collect_images(Path(input_path)):
        print(f"{image_path.name}:")
        image = load_image(image_path)
        stickers = pipeline.run(image, progress=_print_progress)

        sheet_dir = sticker_cfg.sheet_output_dir(image_path.stem)
        archive_path = sticker_cfg.output_root / f"{image_path.stem}.zip"
        _clear_stale_outputs(sheet_dir, archive_path)

        if not stickers:
            # Not an error: the sheet most likely has a non-white background.
            print("  No stickers found; make sure the sheet has a white background.")
            results[image_path.name] = []
            continue

        if use_ai_naming:
            _name_with_ai(stickers, sticker_cfg)

        results[image_path.name] = save_sticker_directory(stickers, sheet_dir)
        write_sticker_archive(stickers, archive_path)
    return results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Cut stickers out of sticker sheets")
    parser.add_argument("input", type=str, help="Sheet image or directory of sheets")
    parser.add_argument("--config", type=str, default=None, help="Optional config overrides file")
    parser.add_argument("--ai-names", action="store_true", help="Name stickers with the naming model")
    args = parser.parse_args()

    overrides = None
    if args.config:
        try:
            overrides = load_config_overrides_from_file(args.config)
        except FileNotFoundError:
            print(f"Config overrides not found: {args.config}")
        except Exception as exc:
            print(f"Failed to parse overrides {args.config}: {exc}")

    summary = run_cut(args.input, overrides, use_ai_naming=args.ai_names)
    for name, files in summary.items():
        print(f"{name}: {len(files)} sticker(s)")
