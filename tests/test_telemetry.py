#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Tests for the archivebuilder event set."""

from archivebuilder.telemetry import EVENT_SET


def test_event_set_mappings():
    assert EVENT_SET.name == "archivebuilder"
    assert [m.name for m in EVENT_SET.mappings] == ["archive_domain", "archive_action", "archive_status"]
    for mapping in EVENT_SET.mappings:
        assert mapping.default_key in mapping.visual_markers


def test_field_mappings_belong_to_event_set():
    log_keys = {fm.log_key for fm in EVENT_SET.field_mappings}
    assert {"archive.domain", "archive.action", "archive.status", "total_bytes", "attempt"} <= log_keys
    assert all(fm.event_set_name == EVENT_SET.name for fm in EVENT_SET.field_mappings)


# 🗜️📁🔚
