import pytest

from stickercut.domain import (
    DEFAULT_STYLE_ID,
    STICKER_STYLES,
    build_sticker_prompt,
    get_style,
    iter_style_ids,
    normalise_sticker_name,
)


def test_style_catalogue():
    assert list(iter_style_ids()) == ["line_cute", "chibi_expressive", "kawaii_pastel", "dynamic_action"]
    assert get_style(None).id == DEFAULT_STYLE_ID
    assert get_style(" Chibi_Expressive ").id == "chibi_expressive"
    with pytest.raises(KeyError):
        get_style("watercolour")


def test_prompt_uses_preset_description():
    style = get_style("kawaii_pastel")
    prompt = build_sticker_prompt(style)
    assert "pure white (#FFFFFF)" in prompt
    assert "Simplified Chinese" in prompt
    assert prompt.endswith(f"Art style: {style.description}")


def test_custom_style_takes_priority():
    style = STICKER_STYLES[0]
    assert build_sticker_prompt(style, "  pixel art  ").endswith("Art style: pixel art")
    assert build_sticker_prompt(style, "   ").endswith(f"Art style: {style.description}")


def test_prompt_language():
    assert "in English" in build_sticker_prompt(STICKER_STYLES[0], language="English")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("thumbs_up", "thumbs_up"),
        ("Thumbs Up", "thumbs_up"),
        ("very-sad crying face", "very_sad_crying"),
        ("Café au lait", "cafe_au_lait"),
        ("  ", None),
        ("!!!", None),
        (None, None),
    ],
)
def test_normalise_sticker_name(raw, expected):
    assert normalise_sticker_name(raw) == expected
