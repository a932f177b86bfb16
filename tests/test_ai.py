import json
import threading
from unittest.mock import MagicMock

import httpx
import pytest
from google.genai import errors as genai_errors
from google.genai import types

from stickercut.ai import (
    GeminiClient,
    GenerationError,
    MissingCredentialError,
    StickerNamer,
    generate_sticker_sheet,
    name_stickers,
    resolve_api_key,
    strip_data_url_prefix,
)
from stickercut.config import AIConfig
from stickercut.domain import get_style
from stickercut.extraction import StickerResult


def _reply(*parts):
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def _text_reply(text):
    return _reply(types.Part(text=text))


def _client(*replies, api_key="secret"):
    sdk = MagicMock()
    sdk.models.generate_content.side_effect = list(replies)
    return GeminiClient(api_key, sdk_client=sdk), sdk


def _request(sdk):
    return sdk.models.generate_content.call_args.kwargs


def _sticker(index):
    return StickerResult(
        id=f"id-{index}",
        image="data:image/png;base64,QUJD",
        source_offset_x=0,
        source_offset_y=0,
        width=1,
        height=1,
        name=f"sticker_{index}",
    )


def test_resolve_api_key(monkeypatch):
    monkeypatch.setenv("STICKER_TEST_KEY", " from-env ")
    assert resolve_api_key(AIConfig(api_key_env="STICKER_TEST_KEY")) == "from-env"
    assert resolve_api_key(AIConfig(api_key="explicit", api_key_env="STICKER_TEST_KEY")) == "explicit"
    monkeypatch.delenv("STICKER_TEST_KEY")
    assert resolve_api_key(AIConfig(api_key_env="STICKER_TEST_KEY")) is None


def test_strip_data_url_prefix():
    assert strip_data_url_prefix("data:image/jpeg;base64,AAAA") == "AAAA"
    assert strip_data_url_prefix("AAAA") == "AAAA"


def test_generate_content_passes_model_and_parts():
    client, sdk = _client(_reply())
    config = types.GenerateContentConfig(temperature=0)
    client.generate_content("some-model", [types.Part(text="hi")], config=config)

    request = _request(sdk)
    assert request["model"] == "some-model"
    assert request["contents"][0].text == "hi"
    assert request["config"] is config


def test_generate_content_without_key():
    client, sdk = _client(api_key=None)
    with pytest.raises(MissingCredentialError):
        client.generate_content("m", [])
    sdk.models.generate_content.assert_not_called()


def test_generation_returns_data_url():
    reply = _reply(
        types.Part(text="Here you go"),
        types.Part(inline_data=types.Blob(mime_type="image/jpeg", data=b"IMG")),
    )
    client, sdk = _client(reply)

    result = generate_sticker_sheet("data:image/png;base64,UkVG", get_style("dynamic_action"), client, "image-model")

    assert result == "data:image/jpeg;base64,SU1H"
    request = _request(sdk)
    assert request["model"] == "image-model"
    reference, prompt = request["contents"]
    assert reference.inline_data.data == b"REF"
    assert reference.inline_data.mime_type == "image/png"
    assert prompt.text.endswith("Art style: " + get_style("dynamic_action").description)


def test_generation_defaults_to_png():
    client, _ = _client(_reply(types.Part(inline_data=types.Blob(data=b"IMG"))))
    assert generate_sticker_sheet("UkVG", get_style(None), client, "m") == "data:image/png;base64,SU1H"


def test_generation_without_image_fails():
    client, _ = _client(_text_reply("I cannot draw that"))
    with pytest.raises(GenerationError, match="No image returned from generation"):
        generate_sticker_sheet("UkVG", get_style(None), client, "m", custom_style="ink wash")


def test_generation_with_empty_response_fails():
    client, _ = _client(types.GenerateContentResponse(candidates=[]))
    with pytest.raises(GenerationError):
        generate_sticker_sheet("UkVG", get_style(None), client, "m")


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("offline"),
        genai_errors.APIError(503, {"error": {"code": 503, "message": "unavailable", "status": "UNAVAILABLE"}}),
    ],
)
def test_generation_request_failures_are_wrapped(error):
    client, sdk = _client()
    sdk.models.generate_content.side_effect = error
    with pytest.raises(GenerationError) as info:
        generate_sticker_sheet("UkVG", get_style(None), client, "m")
    assert info.value.__cause__ is error
    assert sdk.models.generate_content.call_count == 1


def test_generation_without_key():
    client, sdk = _client(api_key=None)
    with pytest.raises(MissingCredentialError):
        generate_sticker_sheet("UkVG", get_style(None), client, "m")
    sdk.models.generate_content.assert_not_called()


def test_namer_normalises_reply():
    client, sdk = _client(_text_reply(json.dumps({"filename": "Happy Dance Party Time"})))
    namer = StickerNamer(AIConfig(), client)

    assert namer.name("data:image/png;base64,QUJD") == "happy_dance_party"
    request = _request(sdk)
    assert request["model"] == "gemini-2.5-flash"
    assert request["config"].response_mime_type == "application/json"
    assert request["contents"][0].inline_data.data == b"ABC"
    assert request["contents"][0].inline_data.mime_type == "image/png"


@pytest.mark.parametrize(
    "reply",
    [_text_reply("not json"), _text_reply("{}"), _text_reply('"just a string"'), types.GenerateContentResponse(candidates=[])],
)
def test_namer_falls_back_on_bad_reply(reply):
    client, _ = _client(reply)
    assert StickerNamer(AIConfig(default_name="sticker"), client).name("QUJD") == "sticker"


def test_namer_falls_back_on_request_error():
    client, sdk = _client()
    sdk.models.generate_content.side_effect = httpx.ReadTimeout("slow")
    assert StickerNamer(AIConfig(), client).name("QUJD") == "sticker"


def test_namer_without_key_does_not_call_out():
    client, sdk = _client(api_key=None)
    assert StickerNamer(AIConfig(), client).name("QUJD") == "sticker"
    sdk.models.generate_content.assert_not_called()


def test_name_stickers_in_batches():
    stickers = [_sticker(i) for i in range(1, 6)]
    seen_flags = []
    lock = threading.Lock()

    namer = MagicMock()

    def _name(payload):
        with lock:
            seen_flags.append([s.naming_in_progress for s in stickers])
        return "wave"

    namer.name.side_effect = _name
    messages = []

    result = name_stickers(stickers, namer, batch_size=2, progress=messages.append)

    assert result == stickers
    assert [s.name for s in stickers] == ["wave"] * 5
    assert not any(s.naming_in_progress for s in stickers)
    assert all(flags[-1] for flags in seen_flags)
    assert messages == ["Naming 2/5...", "Naming 4/5...", "Naming 5/5..."]


def test_single_sticker_reports_no_progress():
    namer = MagicMock()
    namer.name.return_value = "solo"
    messages = []
    name_stickers([_sticker(1)], namer, progress=messages.append)
    assert messages == []


def test_failed_naming_clears_flag():
    namer = MagicMock()
    namer.name.side_effect = RuntimeError("boom")
    sticker = _sticker(1)
    with pytest.raises(RuntimeError):
        name_stickers([sticker], namer)
    assert sticker.naming_in_progress is False
    assert sticker.name == "sticker_1"
