"""
Spreadsheet exporters keyed by option kind slug.

Each exporter takes a session and a target path and returns the number
of rows written.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from sqlalchemy.orm import Session

from shared.config.settings import settings

from .excel_exporter import CountryExport, write_country_export


@dataclass(frozen=True)
class ExportTarget:
    write: Callable[[Session, Path], int]
    filename: str

    def path(self, export_dir: Path) -> Path:
        return Path(export_dir) / self.filename


EXPORTERS: dict[str, ExportTarget] = {
    "country_option": ExportTarget(write=write_country_export, filename=settings.export_filename),
}

__all__ = ["CountryExport", "EXPORTERS", "ExportTarget", "write_country_export"]
