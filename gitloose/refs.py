# refs.py -- Reading branch refs from disk
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

"""Ref handling.

Only loose branch refs (files under ``refs/heads/``) are read. Branch names
are relative to that directory, e.g. ``b"main"`` or ``b"feature/x"``.
"""

__all__ = [
    "LOCK_SUFFIX",
    "DiskRefsContainer",
    "Ref",
    "is_safe_branch_name",
]

import os
from collections.abc import Iterator

from .errors import RefReadError
from .log_utils import getLogger
from .objects import ObjectID

Ref = bytes

# Suffix of the lock files git holds while it updates a ref
LOCK_SUFFIX = b".lock"

# Length of a hex object id
_HEXSHA_LENGTH = 40

logger = getLogger(__name__)


def is_safe_branch_name(name: Ref) -> bool:
    """Check that a branch name cannot point outside refs/heads/.

    Any file name is accepted, including names git itself would refuse to
    create; only names that are empty, absolute, contain a NUL byte or
    climb out of the directory with a ``..`` component are rejected.

    Args:
      name: Branch name, relative to refs/heads/
    Returns: True if name is safe to use as a path
    """
    if not name or b"\0" in name:
        return False
    if name.startswith(b"/") or os.path.isabs(os.fsdecode(name)):
        return False
    components = name.replace(b"\\", b"/").split(b"/")
    return b".." not in components


def _to_ref(name: Ref | str) -> Ref:
    if isinstance(name, str):
        return name.encode("utf-8")
    return name


class DiskRefsContainer:
    """Refs container that reads branch refs from disk."""

    def __init__(self, path: str | bytes | os.PathLike[str]) -> None:
        """Initialize DiskRefsContainer.

        Args:
          path: The git control directory
        """
        self.path = os.fsdecode(os.fspath(path))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.path!r})"

    @property
    def heads_path(self) -> str:
        return os.path.join(self.path, "refs", "heads")

    def refpath(self, name: Ref) -> str:
        """Return the disk path of a branch ref."""
        path = os.fsdecode(name)
        if os.path.sep != "/":
            path = path.replace("/", os.path.sep)
        return os.path.join(self.heads_path, path)

    def branches(self) -> list[Ref]:
        """List the names of all loose branches.

        Every file under refs/heads/ is a branch, whether or not git would
        accept its name, except for the *.lock files git writes while it
        updates a ref.

        Returns: Sorted branch names, relative to refs/heads/
        """
        heads_path = self.heads_path
        prefix_len = len(os.path.join(heads_path, ""))
        names = []
        for root, dirs, files in os.walk(heads_path):
            dirs.sort()
            directory = root[prefix_len:]
            if os.path.sep != "/":
                directory = directory.replace(os.path.sep, "/")
            for filename in files:
                name = os.fsencode(
                    filename if not directory else f"{directory}/{filename}"
                )
                if name.endswith(LOCK_SUFFIX):
                    logger.debug("Skipping lock file %r", name)
                    continue
                names.append(name)
        return sorted(names)

    def __iter__(self) -> Iterator[Ref]:
        return iter(self.branches())

    def read_loose_ref(self, name: Ref | str) -> bytes | None:
        """Read a branch ref file and return its contents.

        Only the first 40 bytes are read.

        Args:
          name: the branch name, relative to refs/heads/
        Returns: The contents of the ref file, or None if the file does not
            exist or cannot be read.
        """
        filename = self.refpath(_to_ref(name))
        try:
            with open(filename, "rb") as f:
                return f.read(_HEXSHA_LENGTH)
        except OSError:
            # don't assume anything specific about the error; in
            # particular, invalid or forbidden paths can raise weird
            # errors depending on the specific operating system
            return None

    def read_branch(self, name: Ref | str) -> ObjectID:
        """Read the object id a branch points at.

        Raises:
          RefReadError: if the name is not safe to use as a path (see
            is_safe_branch_name), or the ref is missing or shorter than a
            full id
        """
        name = _to_ref(name)
        if not is_safe_branch_name(name):
            raise RefReadError(name, "invalid ref name")
        contents = self.read_loose_ref(name)
        if contents is None:
            raise RefReadError(name)
        if len(contents) < _HEXSHA_LENGTH:
            raise RefReadError(name, f"only {len(contents)} bytes")
        return contents

    def resolve(self, commitish: Ref | str) -> ObjectID:
        """Turn a branch name or object id into an object id.

        A branch of that name is tried first; if it cannot be read, the
        input itself is returned as an object id.
        """
        commitish = _to_ref(commitish)
        try:
            sha = self.read_branch(commitish)
        except RefReadError as exc:
            logger.debug("%s; treating %r as an object id", exc, commitish)
            return commitish
        logger.debug(
            "Resolved branch %r to %s", commitish, sha.decode("ascii", "replace")
        )
        return sha

    def as_dict(self) -> dict[Ref, ObjectID]:
        """Return a mapping of branch name to object id for readable branches."""
        ret = {}
        for name in self.branches():
            try:
                ret[name] = self.read_branch(name)
            except RefReadError as exc:
                logger.debug("Skipping branch: %s", exc)
        return ret
