# lru_cache.py -- Simple least-recently-used cache
# Copyright (C) 2026 The Gitloose contributors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# Gitloose is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""A simple least-recently-used (LRU) cache."""

__all__ = ["LRUCache"]

from collections import OrderedDict
from collections.abc import Iterator
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """A class which manages a cache of entries, removing unused ones."""

    def __init__(self, max_cache: int = 100) -> None:
        """Initialize LRUCache.

        Args:
          max_cache: Maximum number of entries to keep. Must be positive.
        """
        if max_cache <= 0:
            raise ValueError(f"max_cache must be positive, got {max_cache}")
        self._max_cache = max_cache
        self._cache: OrderedDict[K, V] = OrderedDict()

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __iter__(self) -> Iterator[K]:
        return iter(self._cache)

    def __getitem__(self, key: K) -> V:
        value = self._cache[key]
        self._cache.move_to_end(key)
        return value

    def __setitem__(self, key: K, value: V) -> None:
        self.add(key, value)

    def add(self, key: K, value: V) -> None:
        """Add a new value to the cache, evicting the oldest entries if needed."""
        self._cache[key] = value
        self._cache.move_to_end(key)
        while len(self._cache) > self._max_cache:
            self._cache.popitem(last=False)

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the cached value for key, or default."""
        try:
            return self[key]
        except KeyError:
            return default

    def clear(self) -> None:
        """Remove all entries from the cache."""
        self._cache.clear()

    @property
    def max_cache(self) -> int:
        """Maximum number of entries kept."""
        return self._max_cache
