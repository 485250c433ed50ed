# cli.py -- Command-line interface for gitloose
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

"""Simple command-line interface to gitloose.

Run without a subcommand, it lists the tree of the first branch and the
ancestry of that branch, then prints "ok".
"""

__all__ = [
    "Command",
    "commands",
    "main",
    "to_display_str",
]

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from typing import TextIO

from .errors import GitLooseError
from .log_utils import _configure_logging_from_trace
from .objects import EntryKind, RawObject, Tree, object_from_raw
from .repo import Repo

logger = logging.getLogger(__name__)


def to_display_str(value: bytes | str) -> str:
    """Convert a bytes or string value to a display string."""
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return value


class Command:
    """A gitloose subcommand."""

    def __init__(
        self, git_dir: str | None = None, outstream: TextIO | None = None
    ) -> None:
        """Initialize a command.

        Args:
          git_dir: Repository to operate on; discovered from the current
            directory when None
          outstream: Stream to write output to (defaults to sys.stdout)
        """
        self.git_dir = git_dir
        self.outstream = outstream if outstream is not None else sys.stdout

    def open_repo(self) -> Repo:
        if self.git_dir is not None:
            return Repo(self.git_dir)
        return Repo.discover(".")

    def write_line(self, line: str) -> None:
        self.outstream.write(line + "\n")

    def run(self, args: Sequence[str]) -> int | None:
        """Run the command."""
        raise NotImplementedError(self.run)


class cmd_ls_tree(Command):
    """List the top-level contents of a commit's tree."""

    def run(self, args: Sequence[str]) -> int | None:
        parser = argparse.ArgumentParser(prog="gitloose ls-tree")
        parser.add_argument("commitish", nargs="?", help="Branch name or commit id")
        parsed_args = parser.parse_args(args)
        with self.open_repo() as repo:
            commitish = parsed_args.commitish or _default_branch(repo)
            if commitish is None:
                logger.error("No branches found in %s", repo.controldir())
                return 1
            for entry in repo.ls_tree(commitish):
                self.write_line(
                    f"{entry.mode} {to_display_str(entry.sha)} "
                    f"{to_display_str(entry.name)}"
                )
        return None


class cmd_rev_list(Command):
    """List a commit and its ancestors, depth first."""

    def run(self, args: Sequence[str]) -> int | None:
        parser = argparse.ArgumentParser(prog="gitloose rev-list")
        parser.add_argument(
            "--unique",
            action="store_true",
            help="List commits reachable along several paths only once.",
        )
        parser.add_argument(
            "-n", "--max-count", type=int, default=None, help="Limit output."
        )
        parser.add_argument("commitish", nargs="?", help="Branch name or commit id")
        parsed_args = parser.parse_args(args)
        with self.open_repo() as repo:
            commitish = parsed_args.commitish or _default_branch(repo)
            if commitish is None:
                logger.error("No branches found in %s", repo.controldir())
                return 1
            for sha in repo.rev_list(
                commitish,
                unique=parsed_args.unique,
                max_entries=parsed_args.max_count,
            ):
                self.write_line(to_display_str(sha))
        return None


class cmd_branch(Command):
    """List branches."""

    def run(self, args: Sequence[str]) -> int | None:
        parser = argparse.ArgumentParser(prog="gitloose branch")
        parser.add_argument(
            "-v", "--verbose", action="store_true", help="Show the commit id too."
        )
        parsed_args = parser.parse_args(args)
        with self.open_repo() as repo:
            if parsed_args.verbose:
                for name, sha in sorted(repo.refs.as_dict().items()):
                    self.write_line(f"{to_display_str(name)} {to_display_str(sha)}")
            else:
                for name in repo.branches():
                    self.write_line(to_display_str(name))
        return None


class cmd_cat_file(Command):
    """Show the type, size or contents of an object."""

    def run(self, args: Sequence[str]) -> int | None:
        parser = argparse.ArgumentParser(prog="gitloose cat-file")
        group = parser.add_mutually_exclusive_group(required=True)
        group.add_argument("-t", dest="show_type", action="store_true")
        group.add_argument("-s", dest="show_size", action="store_true")
        group.add_argument("-p", dest="pretty", action="store_true")
        parser.add_argument("object", help="Branch name or object id")
        parsed_args = parser.parse_args(args)
        with self.open_repo() as repo:
            sha = repo.resolve(parsed_args.object)
            header, body = repo.object_store.read_object(sha)
            if parsed_args.show_type:
                self.write_line(to_display_str(header.type_name))
            elif parsed_args.show_size:
                self.write_line(str(header.size))
            else:
                obj = object_from_raw(sha, header, body)
                if isinstance(obj, Tree):
                    for entry in obj:
                        if entry.is_tree():
                            kind = "tree"
                        elif entry.kind is EntryKind.GITLINK:
                            kind = "commit"
                        else:
                            kind = "blob"
                        self.write_line(
                            f"{entry.mode:06d} {kind} {to_display_str(entry.sha)}"
                            f"\t{to_display_str(entry.name)}"
                        )
                elif isinstance(obj, RawObject):
                    self.outstream.write(to_display_str(obj.data))
                else:
                    self.outstream.write(to_display_str(body))
        return None


class cmd_summary(Command):
    """List the first branch's tree and ancestry."""

    def run(self, args: Sequence[str]) -> int | None:
        parser = argparse.ArgumentParser(prog="gitloose")
        parser.add_argument("branch", nargs="?", help="Branch to show")
        parsed_args = parser.parse_args(args)
        with self.open_repo() as repo:
            branch = parsed_args.branch or _default_branch(repo)
            if branch is None:
                logger.error("No branches found in %s", repo.controldir())
                return 1
            for entry in repo.ls_tree(branch):
                self.write_line(
                    f"{entry.mode} {to_display_str(entry.sha)} "
                    f"{to_display_str(entry.name)}"
                )
            for sha in repo.rev_list(branch):
                self.write_line(to_display_str(sha))
        self.write_line("ok")
        return None


def _default_branch(repo: Repo) -> bytes | None:
    branches = repo.branches()
    if not branches:
        return None
    return branches[0]


commands: dict[str, type[Command]] = {
    "branch": cmd_branch,
    "cat-file": cmd_cat_file,
    "ls-tree": cmd_ls_tree,
    "rev-list": cmd_rev_list,
}


def main(argv: Sequence[str] | None = None, outstream: TextIO | None = None) -> int:
    """Main entry point for the gitloose CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
        outstream: Stream for command output (defaults to sys.stdout)

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(
        prog="gitloose",
        description="Read-only access to the loose objects of a git repository",
        add_help=False,
    )
    parser.add_argument(
        "--git-dir",
        default=os.environ.get("GIT_DIR"),
        help="Path to the repository (defaults to $GIT_DIR, then discovery)",
    )
    parser.add_argument("--help", "-h", action="store_true", help="Show help")

    # Global options come before the subcommand
    global_args, remaining = parser.parse_known_args(argv)

    if global_args.help:
        helpstream = outstream if outstream is not None else sys.stdout
        parser.print_help(file=helpstream)
        helpstream.write(f"\nCommands: {', '.join(sorted(commands))}\n")
        return 0

    # Try to configure from GIT_TRACE, fall back to default if it fails
    if not _configure_logging_from_trace():
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
        )

    if remaining and not remaining[0].startswith("-") and remaining[0] in commands:
        cmd_kls: type[Command] = commands[remaining[0]]
        cmd_args = remaining[1:]
    else:
        cmd_kls = cmd_summary
        cmd_args = remaining

    try:
        ret = cmd_kls(global_args.git_dir, outstream).run(cmd_args)
    except GitLooseError as exc:
        logger.error("error: %s", exc)
        return 1
    return ret or 0


def _main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    _main()
