from .base import JobImporterBase
from .csv_import import CsvImporter
from .reply import ReplyImporter

__all__ = ["JobImporterBase", "CsvImporter", "ReplyImporter", "get_importer"]

_IMPORTERS: dict[str, type[JobImporterBase]] = {
    "reply": ReplyImporter,
    "csv": CsvImporter,
}


def get_importer(kind: str) -> JobImporterBase:
    try:
        return _IMPORTERS[kind]()
    except KeyError:
        raise ValueError(f"Unknown importer {kind!r} (expected one of {sorted(_IMPORTERS)})") from None
