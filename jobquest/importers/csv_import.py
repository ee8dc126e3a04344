"""Import quests from a spreadsheet export (CSV with a header row)."""
from __future__ import annotations

import csv
import io
from typing import Any

from jobquest.errors import ImportParseError
from jobquest.importers.base import JobImporterBase
from jobquest.log import get_logger

log = get_logger(__name__)

HEADERS: list[str] = [
    "title", "company", "location", "url", "tags", "description", "remote",
]

_TRUE_WORDS = {"1", "true", "yes", "y", "remote"}


def _split_tags(cell: str) -> list[str]:
    sep = ";" if ";" in cell else ","
    return [t.strip() for t in cell.split(sep) if t.strip()]


class CsvImporter(JobImporterBase):
    def __init__(self, source: str = "CSV Import") -> None:
        self.source = source

    def parse(self, text: str) -> list[dict[str, Any]]:
        reader = csv.DictReader(io.StringIO(text))
        if not reader.fieldnames:
            raise ImportParseError("CSV has no header row")
        fields = {(name or "").strip().lower(): name for name in reader.fieldnames}
        if "title" not in fields and "company" not in fields:
            raise ImportParseError(
                f"CSV needs at least a title or company column (expected some of {', '.join(HEADERS)})"
            )

        out: list[dict[str, Any]] = []
        skipped = 0
        for row in reader:
            values = {key: (row.get(original) or "").strip() for key, original in fields.items()}
            if not any(values.get(h) for h in HEADERS):
                skipped += 1
                continue
            job: dict[str, Any] = {h: values[h] for h in HEADERS if values.get(h)}
            if "tags" in job:
                job["tags"] = _split_tags(job["tags"])
            job["remote"] = values.get("remote", "").lower() in _TRUE_WORDS
            job["source"] = self.source
            out.append(job)

        if skipped:
            log.info("Skipped %d empty CSV row(s)", skipped)
        log.info("Parsed %d quest(s) from CSV", len(out))
        return out
