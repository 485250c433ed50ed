# log_utils.py -- Logging utilities for gitloose
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

"""Logging utilities for gitloose.

gitloose is mostly used as a library, so by default nothing is printed: the
package logger carries a handler that drops every record. Applications that
want output call default_logging_config(), or remove_null_handler() before
configuring logging themselves.

Modules only need getLogger, which is re-exported here for convenience.
"""

__all__ = [
    "default_logging_config",
    "getLogger",
    "remove_null_handler",
]

import logging
import os
import sys
from typing import Any

getLogger = logging.getLogger


class _NullHandler(logging.Handler):
    """Handler that discards every record."""

    def emit(self, record: logging.LogRecord) -> None:
        pass


_NULL_HANDLER = _NullHandler()
_GITLOOSE_LOGGER = getLogger("gitloose")
_GITLOOSE_LOGGER.addHandler(_NULL_HANDLER)

TRACE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

# GIT_TRACE values, compared case-insensitively
_TRACE_DISABLED = ("", "0", "false")
_TRACE_STDERR = ("1", "2", "true")


def _should_trace() -> bool:
    """Check if GIT_TRACE is enabled."""
    return os.environ.get("GIT_TRACE", "").lower() not in _TRACE_DISABLED


def _get_trace_target() -> str | int | None:
    """Work out where GIT_TRACE asks for trace output to go.

    Returns: None when tracing is off or the value is not understood, 2 for
      stderr, a file descriptor number between 3 and 9, or an absolute path
      (a file, or a directory to create a per-process file in)
    """
    value = os.environ.get("GIT_TRACE", "")
    if value.lower() in _TRACE_DISABLED:
        return None
    if value.lower() in _TRACE_STDERR:
        return 2
    if value.isdigit():
        fd = int(value)
        return fd if 3 <= fd <= 9 else None
    if os.path.isabs(value):
        return value
    return None


def _configure_logging_from_trace() -> bool:
    """Send debug logging wherever GIT_TRACE points.

    Returns: whether tracing was configured
    """
    target = _get_trace_target()
    if target is None:
        return False
    kwargs: dict[str, Any]
    try:
        if target == 2:
            kwargs = {"stream": sys.stderr}
        elif isinstance(target, int):
            kwargs = {"stream": os.fdopen(target, "w", buffering=1)}
        elif os.path.isdir(target):
            # One file per process
            kwargs = {"filename": os.path.join(target, f"trace.{os.getpid()}")}
        else:
            kwargs = {"filename": target}
        logging.basicConfig(level=logging.DEBUG, format=TRACE_FORMAT, **kwargs)
    except OSError as e:
        sys.stderr.write(f"Warning: ignoring GIT_TRACE={target}: {e}\n")
        return False
    return True


def default_logging_config() -> None:
    """Set up the default gitloose loggers.

    GIT_TRACE takes precedence; without it, INFO and above go to stderr.
    """
    remove_null_handler()
    if _configure_logging_from_trace():
        return
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s: %(message)s",
    )


def remove_null_handler() -> None:
    """Detach the record-dropping handler from the gitloose logger.

    Callers that configure logging their own way may call this first, so
    records are no longer passed through a handler that ignores them.
    """
    _GITLOOSE_LOGGER.removeHandler(_NULL_HANDLER)
