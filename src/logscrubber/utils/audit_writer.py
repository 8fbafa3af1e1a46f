"""Audit trail export in CSV or JSON."""

import csv
import json
from typing import Iterable, List

from logscrubber.core.constants import AUDIT_CSV_HEADER, AUDIT_TYPE_JSON
from logscrubber.core.exceptions import PipelineIOError, ScrubberError
from logscrubber.core.models import AuditRecord
from logscrubber.core.schemas import AUDIT_EXPORT_SCHEMA
from logscrubber.utils.validator import validate_document


def audit_rows(records: Iterable[AuditRecord]) -> List[List[str]]:
    return [
        [
            record.original_value,
            record.new_value,
            str(record.times_replaced),
            record.type,
            record.source,
        ]
        for record in records
    ]


def write_audit_csv(file_path: str, records: Iterable[AuditRecord]) -> str:
    try:
        with open(file_path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(AUDIT_CSV_HEADER)
            writer.writerows(audit_rows(records))
    except OSError as e:
        raise PipelineIOError(f"failed to write audit file: {e}", path=file_path) from e
    return file_path


def write_audit_json(file_path: str, records: Iterable[AuditRecord]) -> str:
    payload = [record.model_dump(by_alias=True) for record in records]
    validate_document(payload, AUDIT_EXPORT_SCHEMA, where="Audit export", error=ScrubberError)
    try:
        with open(file_path, "w", encoding="utf-8", errors="surrogateescape") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise PipelineIOError(f"failed to write audit file: {e}", path=file_path) from e
    return file_path


def write_audit_file(file_path: str, records: Iterable[AuditRecord], audit_type: str) -> str:
    if audit_type == AUDIT_TYPE_JSON:
        return write_audit_json(file_path, records)
    return write_audit_csv(file_path, records)
