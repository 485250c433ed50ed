# errors.py -- errors for gitloose
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

"""Gitloose-related exception classes."""

__all__ = [
    "CommitCycleError",
    "DecodeError",
    "FileFormatException",
    "GitLooseError",
    "MalformedObject",
    "NotCommitError",
    "NotTreeError",
    "ObjectNotFound",
    "RefReadError",
    "RepoNotFound",
    "WrongObjectException",
]


def _to_str(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.decode("ascii", "replace")
    return value


class GitLooseError(Exception):
    """Base class for all errors raised by gitloose."""


class RepoNotFound(GitLooseError):
    """Indicates that no Git repository was found."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        """Initialize a RepoNotFound exception.

        Args:
            *args: Error message and additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        Exception.__init__(self, *args, **kwargs)


class RefReadError(GitLooseError):
    """A ref file is missing or does not hold a full object id."""

    def __init__(self, name: bytes | str, reason: str = "not found") -> None:
        """Initialize a RefReadError.

        Args:
            name: The ref name that could not be read.
            reason: Short description of what went wrong.
        """
        self.name = name
        self.reason = reason
        Exception.__init__(self, f"Unable to read ref {_to_str(name)}: {reason}")


class ObjectNotFound(GitLooseError):
    """Indicates that a requested object is not in the object store."""

    def __init__(self, sha: bytes | str, *args: object, **kwargs: object) -> None:
        """Initialize an ObjectNotFound exception.

        Args:
            sha: The id of the missing object.
            *args: Additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        self.sha = sha
        Exception.__init__(self, f"{_to_str(sha)} is not in the object store")


class DecodeError(GitLooseError):
    """The compressed contents of an object could not be inflated."""

    def __init__(self, sha: bytes | str, detail: str | None = None) -> None:
        """Initialize a DecodeError.

        Args:
            sha: The id of the object being decompressed.
            detail: Optional message from the decompressor.
        """
        self.sha = sha
        self.detail = detail
        message = f"Unable to decompress object {_to_str(sha)}"
        if detail is not None:
            message += f": {detail}"
        Exception.__init__(self, message)


class FileFormatException(GitLooseError):
    """Base class for exceptions relating to reading git file formats."""


class MalformedObject(FileFormatException):
    """Indicates an error parsing an object header or body."""

    def __init__(self, message: str, sha: bytes | str | None = None) -> None:
        """Initialize a MalformedObject exception.

        Args:
            message: Description of the grammar violation.
            sha: Id of the object being parsed, if known.
        """
        self.sha = sha
        if sha is not None:
            message = f"{_to_str(sha)}: {message}"
        Exception.__init__(self, message)


class CommitCycleError(MalformedObject):
    """A commit was reached again through its own ancestry."""

    def __init__(self, sha: bytes) -> None:
        """Initialize a CommitCycleError.

        Args:
            sha: The commit that closes the cycle.
        """
        MalformedObject.__init__(self, "commit is its own ancestor", sha)


class WrongObjectException(GitLooseError):
    """Baseclass for all the _ is not a _ exceptions on objects.

    Do not instantiate directly.

    Subclasses should define a type_name attribute that indicates what
    was expected if they were raised.
    """

    type_name: str

    def __init__(self, sha: bytes, *args: object, **kwargs: object) -> None:
        """Initialize a WrongObjectException.

        Args:
            sha: The SHA of the object that was not of the expected type.
            *args: Additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        self.sha = sha
        Exception.__init__(self, f"{_to_str(sha)} is not a {self.type_name}")


class NotCommitError(WrongObjectException):
    """Indicates that the sha requested does not point to a commit."""

    type_name = "commit"


class NotTreeError(WrongObjectException):
    """Indicates that the sha requested does not point to a tree."""

    type_name = "tree"
