#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration for pytest."""

pytest_plugins = [
    "tests.fixtures.builder",
    "tests.fixtures.cli",
    "tests.fixtures.config",
    "tests.fixtures.entries",
]

# 🗜️📁🔚
