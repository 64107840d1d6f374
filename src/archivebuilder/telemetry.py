#
# SPDX-FileCopyrightText: Copyright (c) provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Telemetry configuration for archivebuilder operations."""

from provide.foundation.eventsets.types import EventMapping, EventSet, FieldMapping

EVENT_SET = EventSet(
    name="archivebuilder",
    description="Archive building event enrichment",
    mappings=[
        EventMapping(
            name="archive_domain",
            visual_markers={
                "archive": "🗜️",
                "entry": "📄",
                "recovery": "🩹",
                "copy": "📤",
                "default": "❓",
            },
            default_key="default",
        ),
        EventMapping(
            name="archive_action",
            visual_markers={
                "queue": "📥",
                "build": "🏗️",
                "open": "📂",
                "write": "✍️",
                "action": "🎯",
                "discard": "🗑️",
                "default": "❓",
            },
            default_key="default",
        ),
        EventMapping(
            name="archive_status",
            visual_markers={
                "start": "🚀",
                "failure": "❌",
                "abort": "🛑",
                "ignore": "⏭️",
                "retry": "🔁",
                "recovered": "🩹",
                "cancelled": "✋",
                "complete": "🎉",
                "success": "✅",
                "default": "➡️",
            },
            default_key="default",
        ),
    ],
    field_mappings=[
        FieldMapping(
            log_key="archive.domain",
            event_set_name="archivebuilder",
            description="Archive operation domain",
        ),
        FieldMapping(
            log_key="archive.action",
            event_set_name="archivebuilder",
            description="Archive action being performed",
        ),
        FieldMapping(
            log_key="archive.status",
            event_set_name="archivebuilder",
            description="Archive operation status",
        ),
        FieldMapping(
            log_key="file_count",
            event_set_name="archivebuilder",
            description="Number of files queued for the archive",
            value_type="integer",
        ),
        FieldMapping(
            log_key="total_bytes",
            event_set_name="archivebuilder",
            description="Bytes copied into the archive",
            value_type="integer",
        ),
        FieldMapping(
            log_key="attempt",
            event_set_name="archivebuilder",
            description="Open attempt number for a file",
            value_type="integer",
        ),
        FieldMapping(
            log_key="name",
            event_set_name="archivebuilder",
            description="Archive entry name",
            value_type="string",
        ),
        FieldMapping(
            log_key="path",
            event_set_name="archivebuilder",
            description="File path being processed",
            value_type="string",
        ),
    ],
    priority=90,
)

# 🗜️📁🔚
