"""Read the job record the AI parsing service sends back as JSON text.

The service is asked for a single JSON object but sometimes wraps it in a
```json fence. Whatever comes back is untrusted: fields may be missing and
``add_job`` fills in defaults.
"""
from __future__ import annotations

import json
import re
from typing import Any

from jobquest.errors import ImportParseError
from jobquest.importers.base import JobImporterBase
from jobquest.log import get_logger

log = get_logger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")

ALLOWED_FIELDS: frozenset[str] = frozenset(
    {"title", "company", "location", "url", "tags", "description", "remote", "rarity", "emoji", "type"}
)


class ReplyImporter(JobImporterBase):
    def __init__(self, source: str = "Manual Text") -> None:
        self.source = source

    def parse(self, text: str) -> list[dict[str, Any]]:
        if not isinstance(text, str) or not text.strip():
            raise ImportParseError("The AI returned empty text. Please try again.")

        cleaned = _FENCE.sub("", text.strip())
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            log.error("Could not parse job reply: %s", exc)
            raise ImportParseError("Could not understand the AI's response.") from exc

        # A list reply is accepted when the service batches several postings
        records = data if isinstance(data, list) else [data]
        out: list[dict[str, Any]] = []
        for record in records:
            if not isinstance(record, dict):
                raise ImportParseError("The AI response was incomplete.")
            job = {k: v for k, v in record.items() if k in ALLOWED_FIELDS}
            job["source"] = self.source
            out.append(job)
        log.info("Parsed %d quest(s) from reply", len(out))
        return out
