"""
Schemas for the Configuration File and Audit Export
---------------------------------------------------

This module defines the **JSON Schemas** the scrubber validates against:
- The configuration file, before any value from it is trusted.
- The JSON audit export, so downstream tooling can rely on its shape.

Every section and key is optional; unknown keys are rejected so that a
misspelled setting fails loudly instead of being silently ignored.
"""

from logscrubber.core.constants import AUDIT_TYPES, OVERWRITE_ACTIONS, SCRUB_LEVELS

# Example of a valid config file:
# {
#     "FileSettings": {
#         "InputFile": "mattermost.log",
#         "AuditFileType": "json",
#         "OverwriteAction": "timestamp"
#     },
#     "ScrubSettings": { "ScrubLevel": 2 },
#     "OutputSettings": { "Verbose": false },
#     "ProcessingSettings": { "MaxInputFileSize": "500MB" }
# }

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "FileSettings": {
            "type": "object",
            "properties": {
                "InputFile": {"type": "string"},
                "OutputFile": {"type": "string"},
                "AuditFile": {"type": "string"},
                "AuditFileType": {"enum": ["", *AUDIT_TYPES]},
                "CompressOutputFile": {"type": "boolean"},
                "OverwriteAction": {"enum": ["", *OVERWRITE_ACTIONS]},
            },
            "additionalProperties": False,
        },
        "ScrubSettings": {
            "type": "object",
            "properties": {
                # 0 means "not set" and defers to the command line
                "ScrubLevel": {"enum": [0, *SCRUB_LEVELS]},
                "AliasDomains": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "OutputSettings": {
            "type": "object",
            "properties": {
                "Verbose": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "ProcessingSettings": {
            "type": "object",
            "properties": {
                "MaxInputFileSize": {"type": "string"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}

# Shape of the JSON audit export: an array of records, one per distinct
# original value.
AUDIT_EXPORT_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["OriginalValue", "NewValue", "TimesReplaced", "Type", "Source"],
        "properties": {
            "OriginalValue": {"type": "string", "minLength": 1},
            "NewValue": {"type": "string"},
            "TimesReplaced": {"type": "integer", "minimum": 1},
            "Type": {"enum": ["email", "username", "ip", "uid"]},
            "Source": {"type": "string"},
        },
        "additionalProperties": False,
    },
}
