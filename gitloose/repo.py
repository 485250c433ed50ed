# repo.py -- For dealing with git repositories.
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

"""Repository access.

A Repo ties together the object store and the branch refs of one control
directory. The control directory is always passed in explicitly or found
with Repo.discover(); nothing here depends on the process working directory
except discover()'s default argument.
"""

__all__ = [
    "CONTROLDIR",
    "Repo",
]

import os
from types import TracebackType

from .errors import RepoNotFound
from .log_utils import getLogger
from .object_store import OBJECTDIR, DiskObjectStore
from .objects import Commit, ObjectID, Tree, TreeEntry
from .refs import DiskRefsContainer, Ref
from .walk import walk_ancestry

CONTROLDIR = ".git"
REFSDIR = "refs"

logger = getLogger(__name__)


def _is_controldir(path: str) -> bool:
    return os.path.isdir(os.path.join(path, OBJECTDIR)) and os.path.isdir(
        os.path.join(path, REFSDIR)
    )


class Repo:
    """A git repository backed by loose objects on local disk.

    Attributes:
      path: Path to the working tree, or to the control directory for a bare
        repository
      object_store: DiskObjectStore for the repository's objects
      refs: DiskRefsContainer for the repository's branches
    """

    def __init__(
        self,
        root: str | bytes | os.PathLike[str],
        object_cache_size: int = 0,
    ) -> None:
        """Open a repository on disk.

        Args:
          root: Path to either the root of a working tree (containing .git)
            or the control directory itself
          object_cache_size: Number of parsed objects to cache
        Raises:
          RepoNotFound: if root is not a git repository
        """
        root = os.fsdecode(os.fspath(root))
        hidden_path = os.path.join(root, CONTROLDIR)
        if os.path.isdir(hidden_path):
            self.bare = False
            self._controldir = hidden_path
        elif _is_controldir(root):
            self.bare = True
            self._controldir = root
        else:
            raise RepoNotFound(f"No git repository was found at {root}")
        self.path = root
        self.object_store = DiskObjectStore.from_controldir(
            self._controldir, cache_size=object_cache_size
        )
        self.refs = DiskRefsContainer(self._controldir)

    def __repr__(self) -> str:
        return f"<Repo at {self.path!r}>"

    @classmethod
    def discover(
        cls,
        start: str | bytes | os.PathLike[str] = ".",
        object_cache_size: int = 0,
    ) -> "Repo":
        """Iterate parent directories to discover a repository.

        Return a Repo object for the first parent directory that looks like a
        Git repository.

        Args:
          start: The directory to start discovery from (defaults to '.')
          object_cache_size: Number of parsed objects to cache
        Raises:
          RepoNotFound: if neither start nor any of its parents is a
            repository
        """
        path = os.path.abspath(os.fsdecode(os.fspath(start)))
        while True:
            try:
                repo = cls(path, object_cache_size=object_cache_size)
            except RepoNotFound:
                pass
            else:
                logger.debug("Found repository at %s", path)
                return repo
            new_path, _tail = os.path.split(path)
            if new_path == path:  # Root reached
                break
            path = new_path
        raise RepoNotFound(
            f"No git repository was found at {os.fsdecode(os.fspath(start))}"
        )

    def controldir(self) -> str:
        """Return the path of the control directory."""
        return self._controldir

    def branches(self) -> list[Ref]:
        """Return the names of all branches, sorted."""
        return self.refs.branches()

    def resolve(self, commitish: Ref | str) -> ObjectID:
        """Resolve a branch name or object id to an object id."""
        return self.refs.resolve(commitish)

    def get_commit(self, commitish: Ref | str) -> Commit:
        """Return the commit a branch name or object id refers to."""
        return self.object_store.get_commit(self.resolve(commitish))

    def get_tree(self, commitish: Ref | str) -> Tree:
        """Return the root tree of the commit a commitish refers to."""
        return self.object_store.get_tree(self.get_commit(commitish).tree)

    def ls_tree(self, commitish: Ref | str) -> list[TreeEntry]:
        """List the top-level entries of a commit's tree."""
        return self.get_tree(commitish).items()

    def rev_list(
        self,
        commitish: Ref | str,
        unique: bool = False,
        max_entries: int | None = None,
    ) -> list[ObjectID]:
        """List the ids of a commit and its ancestors in depth-first order.

        See gitloose.walk.walk_ancestry for the ordering.
        """
        return list(
            walk_ancestry(
                self.object_store,
                self.resolve(commitish),
                unique=unique,
                max_entries=max_entries,
            )
        )

    def close(self) -> None:
        """Close any resources held by this repository."""
        self.object_store.close()

    def __enter__(self) -> "Repo":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
