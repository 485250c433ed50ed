#!/usr/bin/python3
# Setup file for gitloose
# Copyright (C) 2026 The Gitloose contributors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

# Project metadata lives in pyproject.toml.

from setuptools import setup

setup(
    package_data={"": ["py.typed"]},
)
