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

"""Utility script to remove cut stickers, archives, and generated sheets."""

from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from stickercut import StickerConfig, load_config_overrides_from_file, load_sticker_config


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove generated sticker outputs")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional path to config overrides (default: ./config.txt)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without removing anything",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt",
    )
    return parser.parse_args()


def _load_config(repo_root: Path, config_path: Optional[Path]) -> StickerConfig:
    if config_path is None:
        config_path = repo_root / "config.txt"
    overrides = load_config_overrides_from_file(config_path, allow_missing=True)
    return load_sticker_config(overrides, base_path=repo_root)


def gather_targets(output_root: Path) -> List[Path]:
    if not output_root.exists():
        return []
    return sorted(output_root.iterdir())


def _format_paths(paths: Iterable[Path]) -> str:
    return "\n".join(str(path) for path in paths)


def remove_targets(targets: Iterable[Path]) -> None:
    for path in targets:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()


def main() -> int:
    args = _parse_args()
    repo_root = Path(__file__).resolve().parent
    sticker_cfg = _load_config(repo_root, args.config)
    output_root = sticker_cfg.output_root

    targets = gather_targets(output_root)
    if not targets:
        print(f"Nothing to remove under {output_root}")
        return 0

    print(f"Preparing to remove {len(targets)} item(s) under {output_root}:")
    print(_format_paths(targets))

    if args.dry_run:
        print("Dry run requested; no files were removed.")
        return 0

    if not args.yes:
        response = input("Proceed? [y/N] ").strip().lower()
        if response not in {"y", "yes"}:
            print("Aborted; no files were removed.")
            return 0

    try:
        remove_targets(targets)
    except OSError as exc:
        print(f"Failed to remove outputs: {exc}", file=sys.stderr)
        return 1

    print("Cleanup complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
