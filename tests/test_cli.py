# test_cli.py -- tests for cli.py
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


"""Tests for the gitloose command-line interface."""

import io
import os
from unittest.mock import patch

from gitloose import cli
from gitloose.object_store import DiskObjectStore
from gitloose.objects import TREE_MODE

from . import TestCase
from .utils import (
    F,
    build_commit_graph,
    make_commit_body,
    make_repo,
    make_tree_body,
    write_loose_object,
    write_ref,
)


class CommandTestCase(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.overrideEnv("GIT_TRACE", None)
        self.overrideEnv("GIT_DIR", None)
        self.path = self.make_tempdir()
        self.controldir = make_repo(self.path)
        self.objects_dir = os.path.join(self.controldir, "objects")
        self.blob = write_loose_object(self.objects_dir, b"blob", b"hello\n")
        self.subtree = write_loose_object(
            self.objects_dir, b"tree", make_tree_body([(F, b"inner", self.blob)])
        )
        self.tree = write_loose_object(
            self.objects_dir,
            b"tree",
            make_tree_body(
                [(F, b"README", self.blob), (TREE_MODE, b"src", self.subtree)]
            ),
        )
        self.root = write_loose_object(
            self.objects_dir, b"commit", make_commit_body(self.tree)
        )
        self.head = write_loose_object(
            self.objects_dir, b"commit", make_commit_body(self.tree, [self.root])
        )
        write_ref(self.controldir, "master", self.head + b"\n")

    def run_command(self, *args: str) -> tuple[int, list[str]]:
        outstream = io.StringIO()
        ret = cli.main(["--git-dir", self.path, *args], outstream=outstream)
        return ret, outstream.getvalue().splitlines()


class SummaryTests(CommandTestCase):
    def test_summary(self) -> None:
        ret, lines = self.run_command()
        self.assertEqual(0, ret)
        self.assertEqual(
            [
                f"100644 {self.blob.decode()} README",
                f"40000 {self.subtree.decode()} src",
                self.head.decode(),
                self.root.decode(),
                "ok",
            ],
            lines,
        )

    def test_first_branch_is_used(self) -> None:
        (other,) = build_commit_graph(self.objects_dir, [[1]])
        write_ref(self.controldir, "aaa", other)
        ret, lines = self.run_command()
        self.assertEqual(0, ret)
        self.assertEqual([other.decode(), "ok"], lines)

    def test_named_branch(self) -> None:
        (other,) = build_commit_graph(self.objects_dir, [[1]])
        write_ref(self.controldir, "aaa", other)
        ret, lines = self.run_command("master")
        self.assertEqual(0, ret)
        self.assertEqual([self.head.decode(), self.root.decode(), "ok"], lines[2:])

    def test_no_branches(self) -> None:
        os.remove(os.path.join(self.controldir, "refs", "heads", "master"))
        with self.assertLogs("gitloose.cli", level="ERROR"):
            ret, lines = self.run_command()
        self.assertEqual(1, ret)
        self.assertEqual([], lines)

    def test_git_dir_from_environment(self) -> None:
        self.overrideEnv("GIT_DIR", self.path)
        outstream = io.StringIO()
        self.assertEqual(0, cli.main([], outstream=outstream))
        self.assertEqual("ok", outstream.getvalue().splitlines()[-1])

    def test_discover_from_cwd(self) -> None:
        subdir = os.path.join(self.path, "sub")
        os.mkdir(subdir)
        self.addCleanup(os.chdir, os.getcwd())
        os.chdir(subdir)
        outstream = io.StringIO()
        self.assertEqual(0, cli.main([], outstream=outstream))
        self.assertEqual("ok", outstream.getvalue().splitlines()[-1])

    def test_not_a_repo(self) -> None:
        outstream = io.StringIO()
        with self.assertLogs("gitloose.cli", level="ERROR") as cm:
            ret = cli.main(["--git-dir", self.make_tempdir()], outstream=outstream)
        self.assertEqual(1, ret)
        self.assertIn("No git repository", cm.output[0])
        self.assertEqual("", outstream.getvalue())

    def test_broken_history(self) -> None:
        missing = b"d" * 40
        head = write_loose_object(
            self.objects_dir, b"commit", make_commit_body(self.tree, [missing])
        )
        write_ref(self.controldir, "master", head)
        with self.assertLogs("gitloose.cli", level="ERROR") as cm:
            ret, lines = self.run_command()
        self.assertEqual(1, ret)
        self.assertIn(missing.decode(), cm.output[0])
        self.assertNotIn("ok", lines)


class HelpTests(TestCase):
    def test_help_goes_to_outstream(self) -> None:
        outstream = io.StringIO()
        self.assertEqual(0, cli.main(["--help"], outstream=outstream))
        output = outstream.getvalue()
        self.assertIn("--git-dir", output)
        self.assertIn("Commands: branch, cat-file, ls-tree, rev-list", output)


class LsTreeTests(CommandTestCase):
    def test_ls_tree(self) -> None:
        ret, lines = self.run_command("ls-tree", "master")
        self.assertEqual(0, ret)
        self.assertEqual(
            [
                f"100644 {self.blob.decode()} README",
                f"40000 {self.subtree.decode()} src",
            ],
            lines,
        )

    def test_ls_tree_commit_id(self) -> None:
        ret, lines = self.run_command("ls-tree", self.root.decode())
        self.assertEqual(0, ret)
        self.assertEqual(2, len(lines))


class RevListTests(CommandTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.r, self.a, self.b, self.m = build_commit_graph(
            self.objects_dir, [[1], [2, 1], [3, 1], [4, 2, 3]]
        )
        write_ref(self.controldir, "merged", self.m)

    def test_rev_list(self) -> None:
        ret, lines = self.run_command("rev-list", "merged")
        self.assertEqual(0, ret)
        self.assertEqual(
            [c.decode() for c in [self.m, self.a, self.r, self.b, self.r]], lines
        )

    def test_unique(self) -> None:
        ret, lines = self.run_command("rev-list", "--unique", "merged")
        self.assertEqual(0, ret)
        self.assertEqual([c.decode() for c in [self.m, self.a, self.r, self.b]], lines)

    def test_max_count(self) -> None:
        ret, lines = self.run_command("rev-list", "-n", "2", "merged")
        self.assertEqual(0, ret)
        self.assertEqual([self.m.decode(), self.a.decode()], lines)


class BranchTests(CommandTestCase):
    def test_branch(self) -> None:
        write_ref(self.controldir, "feature/x", self.root)
        ret, lines = self.run_command("branch")
        self.assertEqual(0, ret)
        self.assertEqual(["feature/x", "master"], lines)

    def test_branch_verbose(self) -> None:
        ret, lines = self.run_command("branch", "-v")
        self.assertEqual(0, ret)
        self.assertEqual([f"master {self.head.decode()}"], lines)


class CatFileTests(CommandTestCase):
    def test_type(self) -> None:
        self.assertEqual(
            (0, ["blob"]), self.run_command("cat-file", "-t", self.blob.decode())
        )
        self.assertEqual((0, ["commit"]), self.run_command("cat-file", "-t", "master"))

    def test_size(self) -> None:
        self.assertEqual(
            (0, ["6"]), self.run_command("cat-file", "-s", self.blob.decode())
        )

    def test_pretty_blob(self) -> None:
        self.assertEqual(
            (0, ["hello"]), self.run_command("cat-file", "-p", self.blob.decode())
        )

    def test_pretty_tree(self) -> None:
        ret, lines = self.run_command("cat-file", "-p", self.tree.decode())
        self.assertEqual(0, ret)
        self.assertEqual(
            [
                f"100644 blob {self.blob.decode()}\tREADME",
                f"040000 tree {self.subtree.decode()}\tsrc",
            ],
            lines,
        )

    def test_pretty_commit(self) -> None:
        ret, lines = self.run_command("cat-file", "-p", self.head.decode())
        self.assertEqual(0, ret)
        self.assertEqual(f"tree {self.tree.decode()}", lines[0])
        self.assertEqual(f"parent {self.root.decode()}", lines[1])
        self.assertEqual("Test message.", lines[-1])

    def test_pretty_reads_object_once(self) -> None:
        get_raw = DiskObjectStore.get_raw
        read = []

        def counting_get_raw(store: DiskObjectStore, sha: bytes) -> bytes:
            read.append(sha)
            return get_raw(store, sha)

        with patch.object(DiskObjectStore, "get_raw", counting_get_raw):
            ret, lines = self.run_command("cat-file", "-p", self.head.decode())
        self.assertEqual(0, ret)
        self.assertEqual([self.head], read)

    def test_missing(self) -> None:
        with self.assertLogs("gitloose.cli", level="ERROR"):
            ret, lines = self.run_command("cat-file", "-t", "d" * 40)
        self.assertEqual(1, ret)


class ToDisplayStrTests(TestCase):
    def test_bytes(self) -> None:
        self.assertEqual("master", cli.to_display_str(b"master"))
        self.assertEqual("caf\ufffd", cli.to_display_str(b"caf\xe9"))

    def test_str(self) -> None:
        self.assertEqual("master", cli.to_display_str("master"))
