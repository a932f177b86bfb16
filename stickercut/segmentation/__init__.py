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

"""Sheet segmentation: background classification, component detection, merging."""

from .background import background_mask, exterior_mask, is_background_pixel, label_components
from .components import ComponentDetector
from .merge import is_close, merge_rects

__all__ = [
    "ComponentDetector",
    "background_mask",
    "exterior_mask",
    "is_background_pixel",
    "is_close",
    "label_components",
    "merge_rects",
]
