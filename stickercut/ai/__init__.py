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

"""Remote AI collaborators: sheet generation and sticker naming."""

from .client import GeminiClient, GenerationError, MissingCredentialError, resolve_api_key, strip_data_url_prefix
from .generation import generate_sticker_sheet
from .naming import StickerNamer, name_stickers

__all__ = [
    "GeminiClient",
    "GenerationError",
    "MissingCredentialError",
    "StickerNamer",
    "generate_sticker_sheet",
    "name_stickers",
    "resolve_api_key",
    "strip_data_url_prefix",
]
