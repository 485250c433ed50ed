# objects.py -- Access to base git objects
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

"""Access to base git objects.

Every loose object decompresses to ``<type> <size>\\0<body>``. This module
parses that header and the bodies of the two structured object types, trees
and commits. Object ids, names and header values are kept as bytes.
"""

__all__ = [
    "OBJECT_TYPES",
    "TREE_MODE",
    "Commit",
    "EntryKind",
    "ObjectHeader",
    "ObjectID",
    "RawObject",
    "ShaFile",
    "Tree",
    "TreeEntry",
    "hex_to_filename",
    "hex_to_sha",
    "object_from_raw",
    "parse_commit",
    "parse_header",
    "parse_time_entry",
    "parse_timezone",
    "parse_tree",
    "sha_to_hex",
    "valid_hexsha",
]

import binascii
import enum
import os
from collections.abc import Iterator
from typing import NamedTuple

from .errors import MalformedObject

ObjectID = bytes

OBJECT_TYPES = (b"commit", b"tree", b"blob", b"tag")

# Length of a raw SHA-1
_RAW_SHA_LENGTH = 20

# Header fields for commits
_TREE_HEADER = b"tree"
_PARENT_HEADER = b"parent"
_AUTHOR_HEADER = b"author"
_COMMITTER_HEADER = b"committer"

# Mode of a subdirectory entry, as written in a tree body.
TREE_MODE = 40000


def sha_to_hex(sha: bytes) -> ObjectID:
    """Takes a raw sha and returns its hex representation."""
    hexsha = binascii.hexlify(sha)
    if len(hexsha) != 40:
        raise ValueError(f"Incorrect length of sha1 string: {hexsha!r}")
    return hexsha


def hex_to_sha(hex: bytes | str) -> bytes:
    """Takes a hex sha and returns a binary sha."""
    if len(hex) != 40:
        raise ValueError(f"Incorrect length of hexsha: {hex!r}")
    return binascii.unhexlify(hex)


def valid_hexsha(hex: bytes | str) -> bool:
    """Check whether hex is a 40 character hexadecimal object id."""
    if len(hex) != 40:
        return False
    try:
        binascii.unhexlify(hex)
    except (TypeError, ValueError):
        return False
    else:
        return True


def hex_to_filename(path: str | bytes | os.PathLike[str], hex: bytes | str) -> str:
    """Return the path of the loose object file for an object id.

    The first two characters of the id name a subdirectory of path, the
    remaining characters the file inside it.

    Args:
      path: The objects directory
      hex: Hex object id
    Returns: Path to the object file
    """
    if len(hex) < 2:
        raise ValueError(f"Object id too short: {hex!r}")
    if isinstance(hex, bytes):
        hex = hex.decode("ascii")
    return os.path.join(os.fsdecode(path), hex[:2], hex[2:])


class ObjectHeader(NamedTuple):
    """The ``<type> <size>`` prefix of a decoded object."""

    type_name: bytes
    size: int


def parse_header(data: bytes, verify_size: bool = True) -> tuple[ObjectHeader, bytes]:
    """Split a decoded object into its header and body.

    Args:
      data: Decompressed object contents
      verify_size: Check that the declared size matches the body length
    Returns: Tuple of (ObjectHeader, body)
    Raises:
      MalformedObject: if the header is missing or invalid
    """
    end = data.find(b"\0")
    if end == -1:
        raise MalformedObject("no NUL byte terminating object header")
    prefix = data[:end]
    type_name, sep, size_text = prefix.partition(b" ")
    if not sep:
        raise MalformedObject(f"no space in object header {prefix[:32]!r}")
    if type_name not in OBJECT_TYPES:
        raise MalformedObject(f"unknown object type {type_name[:32]!r}")
    if not size_text.isdigit():
        raise MalformedObject(f"invalid object size {size_text[:32]!r}")
    size = int(size_text)
    body = data[end + 1 :]
    if verify_size and len(body) != size:
        raise MalformedObject(
            f"{type_name.decode('ascii')} declares {size} bytes, "
            f"body has {len(body)}"
        )
    return ObjectHeader(type_name, size), body


class ShaFile:
    """Base class for parsed git objects."""

    type_name: bytes

    def __init__(self, sha: ObjectID) -> None:
        self.id = sha

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id.decode('ascii', 'replace')}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShaFile):
            return NotImplemented
        return self.type_name == other.type_name and self.id == other.id

    def __hash__(self) -> int:
        return hash((self.type_name, self.id))


class RawObject(ShaFile):
    """An object whose body is not parsed (blobs, tags)."""

    def __init__(self, sha: ObjectID, type_name: bytes, data: bytes) -> None:
        super().__init__(sha)
        self.type_name = type_name
        self.data = data


class EntryKind(enum.Enum):
    """What a tree entry points at, as decoded from its mode."""

    DIRECTORY = "tree"
    REGULAR_FILE = "blob"
    EXECUTABLE_FILE = "executable"
    SYMLINK = "symlink"
    GITLINK = "commit"

    @classmethod
    def from_mode(cls, mode: int) -> "EntryKind":
        """Classify a tree entry mode.

        Raises:
          MalformedObject: for modes git never writes
        """
        try:
            return _MODE_KINDS[mode]
        except KeyError:
            raise MalformedObject(f"unknown tree entry mode {mode}") from None


_MODE_KINDS = {
    TREE_MODE: EntryKind.DIRECTORY,
    100644: EntryKind.REGULAR_FILE,
    # Written by old versions of git
    100664: EntryKind.REGULAR_FILE,
    100755: EntryKind.EXECUTABLE_FILE,
    120000: EntryKind.SYMLINK,
    160000: EntryKind.GITLINK,
}


class TreeEntry(NamedTuple):
    """Named tuple encapsulating a single tree entry.

    ``mode`` is the decimal reading of the mode text, so a subdirectory has
    mode 40000 and a regular file 100644.
    """

    mode: int
    name: bytes
    sha: ObjectID

    def is_tree(self) -> bool:
        """Whether this entry denotes a nested tree."""
        return self.mode == TREE_MODE

    @property
    def kind(self) -> EntryKind:
        return EntryKind.from_mode(self.mode)

    @property
    def octal_mode(self) -> int:
        """The mode as a POSIX mode integer, for use with the stat module."""
        return int(str(self.mode), 8)


def parse_tree(text: bytes) -> list[TreeEntry]:
    """Parse a tree body.

    Args:
      text: Serialized tree body, without the object header
    Returns: list of TreeEntry, in the order they appear in the body
    Raises:
      MalformedObject: if an entry is truncated or its mode is not numeric
    """
    entries = []
    pos = 0
    length = len(text)
    while pos < length:
        name_end = text.find(b"\0", pos)
        if name_end == -1:
            raise MalformedObject(f"tree entry at offset {pos} has no NUL byte")
        mode_text, sep, name = text[pos:name_end].partition(b" ")
        if not sep:
            raise MalformedObject(f"tree entry at offset {pos} has no mode")
        if not mode_text.isdigit():
            raise MalformedObject(f"invalid mode {mode_text!r} in tree entry")
        sha_end = name_end + 1 + _RAW_SHA_LENGTH
        if sha_end > length:
            raise MalformedObject(f"truncated sha for tree entry {name!r}")
        sha = sha_to_hex(text[name_end + 1 : sha_end])
        entries.append(TreeEntry(int(mode_text), name, sha))
        pos = sha_end
    return entries


class Tree(ShaFile):
    """A Git tree object."""

    type_name = b"tree"

    def __init__(self, sha: ObjectID, entries: list[TreeEntry] | None = None) -> None:
        super().__init__(sha)
        self._entries = list(entries or [])

    @classmethod
    def from_raw(cls, sha: ObjectID, body: bytes) -> "Tree":
        """Parse a tree body into a Tree."""
        try:
            return cls(sha, parse_tree(body))
        except MalformedObject as exc:
            if exc.sha is not None:
                raise
            raise MalformedObject(str(exc), sha) from exc

    def __iter__(self) -> Iterator[TreeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __getitem__(self, name: bytes) -> TreeEntry:
        for entry in self._entries:
            if entry.name == name:
                return entry
        raise KeyError(name)

    def items(self) -> list[TreeEntry]:
        """Return the entries of this tree, in body order."""
        return list(self._entries)

    def subtrees(self) -> list[TreeEntry]:
        return [entry for entry in self._entries if entry.is_tree()]


def parse_timezone(text: bytes) -> int:
    """Parse a timezone text fragment (e.g. b'+0100').

    Args:
      text: Text to parse.
    Returns: Offset from UTC in seconds
    """
    if not text or text[:1] not in (b"+", b"-"):
        raise ValueError(f"Timezone must start with + or - ({text!r})")
    sign = text[:1]
    offset = int(text[1:])
    hours = offset // 100
    minutes = offset % 100
    seconds = hours * 3600 + minutes * 60
    if sign == b"-":
        seconds = -seconds
    return seconds


def parse_time_entry(value: bytes) -> tuple[bytes, int | None, int | None]:
    """Parse an author or committer header value.

    Args:
      value: Header value, e.g. b'Jane <jane@example.com> 1234567890 +0100'
    Returns: Tuple of (person, time, timezone offset). Time and timezone
      are None when the value carries no timestamp.
    """
    try:
        sep = value.rindex(b"> ")
    except ValueError:
        return (value, None, None)
    person = value[: sep + 1]
    rest = value[sep + 2 :]
    try:
        timetext, timezonetext = rest.rsplit(b" ", 1)
        time = int(timetext)
        timezone = parse_timezone(timezonetext)
    except ValueError as exc:
        raise MalformedObject(f"invalid time entry {value!r}") from exc
    return (person, time, timezone)


def parse_commit(
    text: bytes,
) -> tuple[ObjectID | None, list[ObjectID], dict[bytes, bytes], bytes]:
    """Parse a commit body.

    Headers run up to the first empty line; the rest of the body is the
    message, kept verbatim. Header lines may end in CRLF. A body without an
    empty line has an empty message.

    Args:
      text: Serialized commit body, without the object header
    Returns: Tuple of (tree, parents, header_fields, message)
    """
    tree = None
    parents: list[ObjectID] = []
    header_fields: dict[bytes, bytes] = {}
    message = b""
    last_field = None
    pos = 0
    while True:
        eol = text.find(b"\n", pos)
        if eol == -1:
            line = text[pos:]
            next_pos = len(text)
        else:
            line = text[pos:eol]
            next_pos = eol + 1
        if line.endswith(b"\r"):
            line = line[:-1]
        if not line:
            # Empty line indicates end of headers
            if eol != -1:
                message = text[next_pos:]
            break
        pos = next_pos
        if line.startswith(b" "):
            if last_field is None:
                raise MalformedObject(f"unexpected continuation line {line[:32]!r}")
            header_fields[last_field] += b"\n" + line[1:]
            continue
        field, _, value = line.partition(b" ")
        if field == _TREE_HEADER:
            tree = value
            last_field = None
        elif field == _PARENT_HEADER:
            parents.append(value)
            last_field = None
        else:
            header_fields[field] = value
            last_field = field
    return tree, parents, header_fields, message


class Commit(ShaFile):
    """A git commit object."""

    type_name = b"commit"

    def __init__(
        self,
        sha: ObjectID,
        tree: ObjectID,
        parents: list[ObjectID] | None = None,
        header_fields: dict[bytes, bytes] | None = None,
        message: bytes = b"",
    ) -> None:
        super().__init__(sha)
        self.tree = tree
        self.parents = list(parents or [])
        self.header_fields = dict(header_fields or {})
        self.message = message

    @classmethod
    def from_raw(cls, sha: ObjectID, body: bytes) -> "Commit":
        """Parse a commit body into a Commit.

        Args:
          sha: Id of the commit, as requested by the caller
          body: Commit body, without the object header
        Raises:
          MalformedObject: if the body has no tree header
        """
        try:
            tree, parents, header_fields, message = parse_commit(body)
        except MalformedObject as exc:
            raise MalformedObject(str(exc), sha) from exc
        if tree is None:
            raise MalformedObject("commit has no tree", sha)
        return cls(sha, tree, parents, header_fields, message)

    @property
    def author(self) -> bytes | None:
        return self.header_fields.get(_AUTHOR_HEADER)

    @property
    def committer(self) -> bytes | None:
        return self.header_fields.get(_COMMITTER_HEADER)

    def _time_entry(self, field: bytes) -> tuple[bytes, int | None, int | None]:
        value = self.header_fields.get(field)
        if value is None:
            return (b"", None, None)
        return parse_time_entry(value)

    @property
    def author_time(self) -> int | None:
        """The time the commit was authored, in seconds since the epoch."""
        return self._time_entry(_AUTHOR_HEADER)[1]

    @property
    def author_timezone(self) -> int | None:
        return self._time_entry(_AUTHOR_HEADER)[2]

    @property
    def commit_time(self) -> int | None:
        """The time the commit was committed, in seconds since the epoch."""
        return self._time_entry(_COMMITTER_HEADER)[1]

    @property
    def commit_timezone(self) -> int | None:
        return self._time_entry(_COMMITTER_HEADER)[2]


def object_from_raw(sha: ObjectID, header: ObjectHeader, body: bytes) -> ShaFile:
    """Build the parsed object for a header and body.

    Trees and commits are parsed; any other type is returned as a RawObject.
    """
    if header.type_name == Commit.type_name:
        return Commit.from_raw(sha, body)
    if header.type_name == Tree.type_name:
        return Tree.from_raw(sha, body)
    return RawObject(sha, header.type_name, body)
