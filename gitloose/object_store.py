# object_store.py -- Object store for loose git objects
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

"""Git object store for loose objects on disk."""

__all__ = [
    "OBJECTDIR",
    "DiskObjectStore",
]

import os
import zlib
from collections.abc import Iterator

from .errors import (
    DecodeError,
    MalformedObject,
    NotCommitError,
    NotTreeError,
    ObjectNotFound,
)
from .log_utils import getLogger
from .lru_cache import LRUCache
from .objects import (
    Commit,
    ObjectHeader,
    ObjectID,
    ShaFile,
    Tree,
    hex_to_filename,
    object_from_raw,
    parse_header,
    valid_hexsha,
)

OBJECTDIR = "objects"

logger = getLogger(__name__)


def _sha_bytes(sha: ObjectID | str) -> ObjectID:
    if isinstance(sha, str):
        return sha.encode("utf-8")
    return sha


class DiskObjectStore:
    """Read-only store of the loose objects in a directory.

    Nothing is cached unless cache_size is given, in which case up to that
    many parsed objects are kept in an LRU cache. The raw contents returned
    by get_raw() are always read from disk.
    """

    def __init__(
        self,
        path: str | bytes | os.PathLike[str],
        cache_size: int = 0,
        verify_size: bool = True,
    ) -> None:
        """Open an object store.

        Args:
          path: Path to the objects directory
          cache_size: Number of parsed objects to cache (0 disables caching)
          verify_size: Reject objects whose declared size does not match
            their body length
        """
        self.path = os.fsdecode(os.fspath(path))
        self.verify_size = verify_size
        self._cache: LRUCache[ObjectID, ShaFile] | None = None
        if cache_size > 0:
            self._cache = LRUCache(max_cache=cache_size)

    @classmethod
    def from_controldir(
        cls,
        controldir: str | bytes | os.PathLike[str],
        cache_size: int = 0,
        verify_size: bool = True,
    ) -> "DiskObjectStore":
        """Open the object store of a git control directory."""
        return cls(
            os.path.join(os.fsdecode(os.fspath(controldir)), OBJECTDIR),
            cache_size=cache_size,
            verify_size=verify_size,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.path!r})>"

    def _get_shafile_path(self, sha: ObjectID) -> str:
        return hex_to_filename(self.path, sha)

    def __contains__(self, sha: object) -> bool:
        """Check if an object is present as a loose object."""
        if not isinstance(sha, (bytes, str)) or not valid_hexsha(sha):
            return False
        return os.path.isfile(self._get_shafile_path(_sha_bytes(sha)))

    def __iter__(self) -> Iterator[ObjectID]:
        """Iterate over the ids of the loose objects in this store."""
        try:
            bases = sorted(os.listdir(self.path))
        except FileNotFoundError:
            return
        for base in bases:
            if len(base) != 2:
                continue
            for rest in sorted(os.listdir(os.path.join(self.path, base))):
                sha = os.fsencode(base + rest)
                if not valid_hexsha(sha):
                    continue
                yield sha

    def get_raw(self, sha: ObjectID | str) -> bytes:
        """Read and decompress an object.

        Args:
          sha: Hex id of the object
        Returns: The decompressed contents, header included
        Raises:
          ObjectNotFound: if there is no loose object with this id
          DecodeError: if the file is not exactly one complete zlib stream
        """
        sha = _sha_bytes(sha)
        if not valid_hexsha(sha):
            raise ObjectNotFound(sha)
        path = self._get_shafile_path(sha)
        logger.debug("Reading loose object %s", path)
        try:
            with open(path, "rb") as f:
                compressed = f.read()
        except OSError as exc:
            raise ObjectNotFound(sha) from exc
        dcomp = zlib.decompressobj()
        try:
            data = dcomp.decompress(compressed)
            data += dcomp.flush()
        except zlib.error as exc:
            raise DecodeError(sha, str(exc)) from exc
        if not dcomp.eof:
            raise DecodeError(sha, "truncated stream")
        if dcomp.unused_data:
            raise DecodeError(
                sha, f"{len(dcomp.unused_data)} bytes after end of stream"
            )
        return data

    def read_object(self, sha: ObjectID | str) -> tuple[ObjectHeader, bytes]:
        """Read an object and split it into header and body."""
        sha = _sha_bytes(sha)
        data = self.get_raw(sha)
        try:
            return parse_header(data, verify_size=self.verify_size)
        except MalformedObject as exc:
            raise MalformedObject(str(exc), sha) from exc

    def __getitem__(self, sha: ObjectID | str) -> ShaFile:
        """Obtain a parsed object by id."""
        sha = _sha_bytes(sha)
        if self._cache is not None:
            try:
                return self._cache[sha]
            except KeyError:
                pass
        header, body = self.read_object(sha)
        obj = object_from_raw(sha, header, body)
        if self._cache is not None:
            self._cache[sha] = obj
        return obj

    def get_commit(self, sha: ObjectID | str) -> Commit:
        """Obtain a commit by id.

        Raises:
          NotCommitError: if the object is not a commit
        """
        obj = self[sha]
        if not isinstance(obj, Commit):
            raise NotCommitError(obj.id)
        return obj

    def get_tree(self, sha: ObjectID | str) -> Tree:
        """Obtain a tree by id.

        Raises:
          NotTreeError: if the object is not a tree
        """
        obj = self[sha]
        if not isinstance(obj, Tree):
            raise NotTreeError(obj.id)
        return obj

    def close(self) -> None:
        """Drop any cached objects."""
        if self._cache is not None:
            self._cache.clear()
