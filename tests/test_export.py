import zipfile

import numpy as np

from stickercut.export import save_sticker_directory, unique_filenames, write_sticker_archive
from stickercut.extraction import StickerResult
from stickercut.io_utils import decode_image_bytes, encode_data_url, encode_png


def _sticker(name, value=0):
    pixels = np.full((4, 5, 4), value, dtype=np.uint8)
    pixels[..., 3] = 255
    return StickerResult(
        id=f"id-{name}-{value}",
        image=encode_data_url(encode_png(pixels)),
        source_offset_x=0,
        source_offset_y=0,
        width=5,
        height=4,
        name=name,
        pixels=pixels,
    )


def test_unique_filenames_appends_counters():
    assert unique_filenames(["cat", "cat", "dog", "cat"]) == ["cat", "cat_1", "dog", "cat_2"]


def test_unique_filenames_avoids_existing_suffixes():
    assert unique_filenames(["cat_1", "cat", "cat"]) == ["cat_1", "cat", "cat_2"]


def test_unique_filenames_sanitises():
    assert unique_filenames(["a/b", "", "..."]) == ["a_b", "sticker", "sticker_1"]


def test_archive_keeps_every_sticker(tmp_path):
    stickers = [_sticker("cat", 10), _sticker("cat", 20), _sticker("sleepy_dog", 30)]
    path = tmp_path / "nested" / "stickers.zip"

    members = write_sticker_archive(stickers, path)

    assert members == ["cat.png", "cat_1.png", "sleepy_dog.png"]
    with zipfile.ZipFile(path) as archive:
        assert archive.namelist() == members
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in archive.infolist())
        second = decode_image_bytes(archive.read("cat_1.png"))
    assert np.array_equal(second, stickers[1].pixels)


def test_directory_writer(tmp_path):
    stickers = [_sticker("wave"), _sticker("wave", 5)]
    files = save_sticker_directory(stickers, tmp_path / "sheet")
    assert files == ["wave.png", "wave_1.png"]
    assert sorted(p.name for p in (tmp_path / "sheet").iterdir()) == files


def test_empty_archive(tmp_path):
    path = tmp_path / "empty.zip"
    assert write_sticker_archive([], path) == []
    with zipfile.ZipFile(path) as archive:
        assert archive.namelist() == []
