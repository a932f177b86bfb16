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

"""Gemini access through the ``google-genai`` SDK."""

from __future__ import annotations

import base64
import logging
import os
import threading
from typing import Any, Iterator, List, Optional

from dotenv import load_dotenv
from google import genai
from google.genai import types

from ..config import AIConfig
from ..io_utils import split_data_url

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class MissingCredentialError(RuntimeError):
    """Raised when no API key is configured."""


class GenerationError(RuntimeError):
    """Raised when the remote model fails or returns no usable content."""


def resolve_api_key(config: AIConfig) -> Optional[str]:
    """Return the configured key, falling back to the ``config.api_key_env`` variable."""

    if config.api_key:
        return config.api_key
    value = os.getenv(config.api_key_env, "").strip()
    return value or None


def strip_data_url_prefix(payload: str) -> str:
    """Drop a ``data:image/...;base64,`` prefix when present."""

    return split_data_url(payload)[1]


def image_part(payload: str, mime_type: Optional[str] = None) -> types.Part:
    """Build an inline-image part from a data URL or bare base64 string."""

    detected_mime, data = split_data_url(payload)
    return types.Part.from_bytes(data=base64.b64decode(data), mime_type=mime_type or detected_mime)


def text_part(text: str) -> types.Part:
    return types.Part.from_text(text=text)


def iter_response_parts(response: Any) -> Iterator[types.Part]:
    """Yield the content parts of the first candidate; nothing when the response is empty."""

    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return
    for part in candidates[0].content.parts or []:
        yield part


def response_text(response: Any) -> str:
    return "".join(part.text for part in iter_response_parts(response) if part.text)


class GeminiClient:
    """Holds the credential and builds the SDK client on first use."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        timeout: float = 120.0,
        sdk_client: Optional[genai.Client] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._sdk = sdk_client
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: AIConfig, sdk_client: Optional[genai.Client] = None) -> "GeminiClient":
        return cls(resolve_api_key(config), base_url=config.base_url, timeout=config.timeout, sdk_client=sdk_client)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    @property
    def sdk(self) -> genai.Client:
        with self._lock:
            if self._sdk is None:
                # HttpOptions.timeout is in milliseconds.
                options = types.HttpOptions(base_url=self.base_url, timeout=int(self.timeout * 1000))
                self._sdk = genai.Client(api_key=self.api_key, http_options=options)
            return self._sdk

    def generate_content(
        self,
        model: str,
        parts: List[types.Part],
        config: Optional[types.GenerateContentConfig] = None,
    ) -> types.GenerateContentResponse:
        """Send a single-turn request and return the SDK response."""

        if not self.api_key:
            raise MissingCredentialError("API key is not set")
        logger.debug("generate_content model=%s parts=%d", model, len(parts))
        return self.sdk.models.generate_content(model=model, contents=parts, config=config)
