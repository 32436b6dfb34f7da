"""
Country option spreadsheet export.

Writes every active country option to an .xlsx workbook with xlsxwriter.
The workbook is written to a temporary file next to the target and then
renamed over it, so readers never see a half-written file.

Usage::

    with get_db_context() as db:
        rows = CountryExport(db).write(settings.export_path)
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Sequence

import xlsxwriter
from sqlalchemy.orm import Session

from shared.config.logging import export_logger as logger
from options_api.models import option_model
from options_api.registry import COUNTRY_OPTION
from options_api.services.crud.repository import OptionRepository

HEADERS: tuple[str, ...] = (
    "ID",
    "Name",
    "Dial Code",
    "Code",
    "Description",
    "Created At",
    "Updated At",
    "Deleted At",
)

_COLOR_HEADER_BG = "#1E3A5F"
_COLOR_WHITE = "#FFFFFF"
_COLOR_LIGHT_GREY = "#F3F4F6"

_MAX_COL_WIDTH = 60
_MIN_COL_WIDTH = 8
_DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"


class CountryExport:
    """Builds the country option workbook from the database."""

    sheet_name = "Countries"

    def __init__(self, db: Session):
        self._repo = OptionRepository(option_model(COUNTRY_OPTION), db)

    def rows(self) -> list[tuple[Any, ...]]:
        """One tuple per active country, in creation order."""
        return [
            (
                option.id,
                option.name,
                option.dial_code,
                option.code,
                option.description,
                option.created_at,
                option.updated_at,
                option.deleted_at,
            )
            for option in self._repo.find_all()
        ]

    def write(self, path: Path) -> int:
        """
        Write the workbook to path, replacing any previous export.

        Returns:
            Number of data rows written.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rows = self.rows()

        fd, tmp_name = tempfile.mkstemp(suffix=".xlsx", dir=path.parent)
        os.close(fd)
        try:
            self._write_workbook(tmp_name, rows)
            os.replace(tmp_name, path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.info("Country export written", path=str(path), rows=len(rows))
        return len(rows)

    def _write_workbook(self, filename: str, rows: Sequence[tuple[Any, ...]]) -> None:
        workbook = xlsxwriter.Workbook(filename, {"remove_timezone": True})
        try:
            worksheet = workbook.add_worksheet(self.sheet_name)
            header_fmt = workbook.add_format({
                "bold": True,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_HEADER_BG,
                "align": "center",
                "valign": "vcenter",
                "border": 1,
            })
            stripe_fmt = workbook.add_format({"bg_color": _COLOR_LIGHT_GREY})
            date_fmt = workbook.add_format({"num_format": _DATETIME_FORMAT})
            stripe_date_fmt = workbook.add_format({
                "num_format": _DATETIME_FORMAT,
                "bg_color": _COLOR_LIGHT_GREY,
            })

            widths = [len(h) for h in HEADERS]
            for col, header in enumerate(HEADERS):
                worksheet.write_string(0, col, header, header_fmt)

            for row_idx, row in enumerate(rows, start=1):
                striped = row_idx % 2 == 0
                for col, value in enumerate(row):
                    if value is None:
                        worksheet.write_blank(row_idx, col, None, stripe_fmt if striped else None)
                        continue
                    if hasattr(value, "strftime"):
                        worksheet.write_datetime(
                            row_idx, col, value, stripe_date_fmt if striped else date_fmt
                        )
                        widths[col] = max(widths[col], len(_DATETIME_FORMAT))
                        continue
                    text = str(value)
                    worksheet.write_string(row_idx, col, text, stripe_fmt if striped else None)
                    widths[col] = max(widths[col], len(text))

            for col, width in enumerate(widths):
                worksheet.set_column(col, col, min(max(width + 2, _MIN_COL_WIDTH), _MAX_COL_WIDTH))
            worksheet.freeze_panes(1, 0)
        finally:
            workbook.close()


def write_country_export(db: Session, path: Path) -> int:
    """Exporter entry point used by the outbox processor and the CLI."""
    return CountryExport(db).write(path)
