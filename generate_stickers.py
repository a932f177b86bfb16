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

"""Generate a sticker sheet from a reference character image, then cut it."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from cut_stickers import run_cut
from stickercut import get_style, load_config_overrides_from_file, load_sticker_config
from stickercut.ai import GeminiClient, generate_sticker_sheet
from stickercut.domain import iter_style_ids
from stickercut.io_utils import decode_data_url, encode_data_url, ensure_dir, split_data_url


def run_generate(
    reference_path: Union[str, Path],
    style_id: Optional[str] = None,
    custom_style: Optional[str] = None,
    config: Optional[Mapping[str, object]] = None,
    use_ai_naming: bool = True,
    client: Optional[GeminiClient] = None,
) -> Dict[str, List[str]]:
    """
    Generate a sheet with the image model and cut it like any uploaded sheet.

    The generated sheet is saved as ``<output_root>/<reference stem>_sheet.<ext>``
    (extension from the returned image type) before cutting.

    Args:
        reference_path: Image of the character to turn into stickers
        style_id: One of the style presets (defaults to ``line_cute``)
        custom_style: Free-text style that overrides the preset description
        config: Optional configuration dictionary to override defaults
        use_ai_naming: Name the cut stickers with the naming model
        client: Pre-built API client (mainly for tests)

    Returns:
        The summary returned by :func:`cut_stickers.run_cut` for the generated sheet
    """
    overrides = dict(config or {})
    sticker_cfg = load_sticker_config(dict(overrides), base_path=Path.cwd())
    style = get_style(style_id)
    client = client or GeminiClient.from_config(sticker_cfg.ai)

    reference = Path(reference_path)
    if not reference.is_file():
        raise FileNotFoundError(f"Reference image not found: {reference}")
    mime_type = mimetypes.guess_type(reference.name)[0] or "image/png"
    reference_payload = encode_data_url(reference.read_bytes(), mime_type)

    print(f"Generating sheet in style '{style.id}'...")
    sheet_url = generate_sticker_sheet(
        reference_payload,
        style,
        client,
        sticker_cfg.ai.generation_model,
        custom_style=custom_style,
    )

    sheet_mime = split_data_url(sheet_url)[0]
    extension = mimetypes.guess_extension(sheet_mime) or ".png"
    sheet_path = ensure_dir(sticker_cfg.output_root) / f"{reference.stem}_sheet{extension}"
    sheet_path.write_bytes(decode_data_url(sheet_url))
    print(f"Saved generated sheet to {sheet_path}")

    return run_cut(sheet_path, overrides, use_ai_naming=use_ai_naming)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate and cut a sticker sheet")
    parser.add_argument("reference", type=str, help="Reference character image")
    parser.add_argument("--style", type=str, default=None, choices=list(iter_style_ids()), help="Style preset")
    parser.add_argument("--custom-style", type=str, default=None, help="Free-text style description")
    parser.add_argument("--config", type=str, default=None, help="Optional config overrides file")
    parser.add_argument("--no-ai-names", action="store_true", help="Keep the default sticker_N names")
    args = parser.parse_args()

    overrides = None
    if args.config:
        try:
            overrides = load_config_overrides_from_file(args.config)
        except FileNotFoundError:
            print(f"Config overrides not found: {args.config}")
        except Exception as exc:
            print(f"Failed to parse overrides {args.config}: {exc}")

    try:
        summary = run_generate(
            args.reference,
            style_id=args.style,
            custom_style=args.custom_style,
            config=overrides,
            use_ai_naming=not args.no_ai_names,
        )
    except RuntimeError as exc:
        print(f"Generation failed: {exc}")
        raise SystemExit(1)
    for name, files in summary.items():
        print(f"{name}: {len(files)} sticker(s)")
