# walk.py -- Walking the ancestry of a commit
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

"""Depth-first walk over the parents of a commit.

Commits are visited in preorder: a commit, then the full ancestry of its
first parent, then that of its second parent, and so on. By default a commit
reachable along several paths is visited once per path, so a merge M of A
and B that share the parent R yields M, A, R, B, R.
"""

__all__ = [
    "Walker",
    "walk_ancestry",
]

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .object_store import DiskObjectStore

from .errors import CommitCycleError
from .log_utils import getLogger
from .objects import ObjectID

logger = getLogger(__name__)


def walk_ancestry(
    store: "DiskObjectStore",
    start: ObjectID | str,
    unique: bool = False,
    max_entries: int | None = None,
) -> Iterator[ObjectID]:
    """Iterate over the ids of start and its ancestors.

    Args:
      store: Object store to read commits from
      start: Id of the commit to start from
      unique: Visit each commit only once, even if it is reachable along
        several paths
      max_entries: Stop after this many ids
    Yields: commit ids, in depth-first preorder
    Raises:
      CommitCycleError: if a commit turns out to be its own ancestor
    """
    if isinstance(start, str):
        start = start.encode("utf-8")
    if max_entries is not None and max_entries <= 0:
        return
    # Entries are (sha, leaving); a leaving marker is popped once the
    # ancestry of sha has been fully visited.
    todo: list[tuple[ObjectID, bool]] = [(start, False)]
    on_path: set[ObjectID] = set()
    seen: set[ObjectID] = set()
    count = 0
    while todo:
        sha, leaving = todo.pop()
        if leaving:
            on_path.discard(sha)
            continue
        if unique:
            if sha in seen:
                continue
            seen.add(sha)
        elif sha in on_path:
            raise CommitCycleError(sha)
        commit = store.get_commit(sha)
        yield sha
        count += 1
        if max_entries is not None and count >= max_entries:
            return
        if not unique:
            on_path.add(sha)
            todo.append((sha, True))
        todo.extend((parent, False) for parent in reversed(commit.parents))
    logger.debug("Walked %d commits from %s", count, start.decode("ascii", "replace"))


class Walker:
    """Iterable over the ancestry of a commit.

    Each iteration re-reads the commits from the store.
    """

    def __init__(
        self,
        store: "DiskObjectStore",
        start: ObjectID | str,
        unique: bool = False,
        max_entries: int | None = None,
    ) -> None:
        """Constructor.

        Args:
          store: Object store to read commits from
          start: Id of the commit to start from
          unique: Visit each commit only once
          max_entries: The maximum number of ids to yield, or None for no limit
        """
        self.store = store
        self.start = start
        self.unique = unique
        self.max_entries = max_entries

    def __iter__(self) -> Iterator[ObjectID]:
        return walk_ancestry(
            self.store, self.start, unique=self.unique, max_entries=self.max_entries
        )
