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

"""Unique identifiers for extracted stickers."""

from __future__ import annotations

import os
import random
import string
import time
import uuid
from typing import Optional, Protocol

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


class IdGenerator(Protocol):
    def __call__(self) -> str:
        ...


class UuidIdGenerator:
    """Random (version 4) UUIDs backed by the operating system's secure random source."""

    def __call__(self) -> str:
        return str(uuid.uuid4())


class FallbackIdGenerator:
    """Millisecond timestamp plus a pseudo-random suffix, both in base 36."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def __call__(self) -> str:
        stamp = _to_base36(time.time_ns() // 1_000_000)
        suffix = _to_base36(self._rng.getrandbits(52))
        return stamp + suffix


def secure_random_available() -> bool:
    try:
        os.urandom(1)
    except NotImplementedError:
        return False
    return True


def default_id_generator() -> IdGenerator:
    """Pick the UUID strategy when a secure random source exists, otherwise the fallback."""

    if secure_random_available():
        return UuidIdGenerator()
    return FallbackIdGenerator()
