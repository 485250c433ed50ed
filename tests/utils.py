# utils.py -- Test utilities for gitloose.
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

"""Utility functions common to gitloose tests.

gitloose never writes objects, so the fixtures here build loose objects and
refs by hand.
"""

import binascii
import hashlib
import os
import zlib
from collections.abc import Iterable, Sequence

# Plain files are very frequently used in tests, so let the mode be very short.
F = 100644  # Shorthand mode for Files.

DEFAULT_AUTHOR = b"Test Author <test@nodomain.com> 1262304000 +0000"


def make_raw_object(type_name: bytes, body: bytes) -> bytes:
    """Return the uncompressed contents of a loose object."""
    return type_name + b" " + str(len(body)).encode("ascii") + b"\0" + body


def write_loose_object(
    objects_dir: str, type_name: bytes, body: bytes, raw: bytes | None = None
) -> bytes:
    """Write a loose object and return its hex id.

    Args:
      objects_dir: The objects directory
      type_name: Object type
      body: Object body
      raw: Uncompressed contents to store instead of the well-formed
        header and body; the id is still computed from type_name and body
    """
    contents = make_raw_object(type_name, body)
    sha = hashlib.sha1(contents).hexdigest().encode("ascii")
    if raw is not None:
        contents = raw
    write_compressed(objects_dir, sha, zlib.compress(contents))
    return sha


def write_compressed(objects_dir: str, sha: bytes, data: bytes) -> str:
    """Store data verbatim as the file for sha."""
    hexsha = sha.decode("ascii")
    subdir = os.path.join(objects_dir, hexsha[:2])
    os.makedirs(subdir, exist_ok=True)
    path = os.path.join(subdir, hexsha[2:])
    with open(path, "wb") as f:
        f.write(data)
    return path


def make_tree_body(entries: Iterable[tuple[int | bytes, bytes, bytes]]) -> bytes:
    """Serialize (mode, name, hexsha) tuples into a tree body."""
    chunks = []
    for mode, name, hexsha in entries:
        if isinstance(mode, int):
            mode = str(mode).encode("ascii")
        chunks.append(mode + b" " + name + b"\0" + binascii.unhexlify(hexsha))
    return b"".join(chunks)


def make_commit_body(
    tree: bytes,
    parents: Sequence[bytes] = (),
    message: bytes = b"Test message.\n",
    author: bytes = DEFAULT_AUTHOR,
    committer: bytes | None = None,
) -> bytes:
    """Serialize a commit body."""
    lines = [b"tree " + tree]
    lines.extend(b"parent " + p for p in parents)
    lines.append(b"author " + author)
    lines.append(b"committer " + (committer or author))
    return b"\n".join(lines) + b"\n\n" + message


def make_repo(path: str, bare: bool = False) -> str:
    """Create the directories of an empty repository.

    Returns: the control directory
    """
    controldir = path if bare else os.path.join(path, ".git")
    os.makedirs(os.path.join(controldir, "objects"), exist_ok=True)
    os.makedirs(os.path.join(controldir, "refs", "heads"), exist_ok=True)
    return controldir


def write_ref(controldir: str, name: str, contents: bytes) -> None:
    """Write a branch ref file."""
    path = os.path.join(controldir, "refs", "heads", *name.split("/"))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(contents)


def build_commit_graph(
    objects_dir: str, commit_spec: Sequence[Sequence[int]]
) -> list[bytes]:
    """Build a commit graph from a concise specification.

    Sample usage:
    >>> c1, c2, c3 = build_commit_graph(objects_dir, [[1], [2, 1], [3, 1, 2]])

    Each element of commit_spec is a list of commit numbers: the commit
    itself, followed by its parents in order. Parents must appear before
    their children. All commits share one empty tree.

    Returns: the hex ids of the commits, in commit_spec order
    """
    tree = write_loose_object(objects_dir, b"tree", b"")
    nums: dict[int, bytes] = {}
    commits = []
    for spec in commit_spec:
        num, parent_nums = spec[0], spec[1:]
        try:
            parents = [nums[pn] for pn in parent_nums]
        except KeyError as exc:
            missing = exc.args[0]
            raise ValueError(f"Unknown parent {missing}") from exc
        body = make_commit_body(
            tree, parents, message=b"Commit " + str(num).encode("ascii") + b"\n"
        )
        sha = write_loose_object(objects_dir, b"commit", body)
        nums[num] = sha
        commits.append(sha)
    return commits
