"""Output strategies turning an assembled report into bytes."""
from __future__ import annotations

import csv
import enum
import io
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Protocol

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from company_store.services.reporting.assembler import ReportDocument, ReportSection

DATE_FORMAT = "%d/%m/%Y %H:%M"
WORKBOOK_DATE_FORMAT = "DD/MM/YYYY HH:MM"
_CENT = Decimal("0.01")


class UnknownReportFormatError(ValueError):
    """Raised for output formats other than delimited text and workbook."""


class ReportFormat(str, enum.Enum):
    CSV = "csv"
    WORKBOOK = "xlsx"

    @classmethod
    def parse(cls, value: "str | ReportFormat") -> "ReportFormat":
        if isinstance(value, ReportFormat):
            return value
        normalized = value.strip().lower()
        if normalized == "workbook":
            return cls.WORKBOOK
        try:
            return cls(normalized)
        except ValueError as exc:
            raise UnknownReportFormatError(f"Unsupported report format '{value}'") from exc


class ReportSerializer(Protocol):
    extension: str
    media_type: str

    def serialize(self, document: ReportDocument) -> bytes:
        """Render ``document`` into a complete file body."""


def format_currency(amount: Decimal | int | float, symbol: str = "R$") -> str:
    """Render ``amount`` as ``R$ 1.234,56``."""

    value = Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{symbol} {grouped}"


class DelimitedTextSerializer:
    """Semicolon separated text with a UTF-8 byte-order mark.

    Sections are written one after another: a single-cell title row, the
    header row, the data rows, then one blank row before the next section.
    """

    extension = "csv"
    media_type = "text/csv; charset=utf-8"

    def __init__(self, *, separator: str = ";", currency_symbol: str = "R$") -> None:
        self._separator = separator
        self._currency_symbol = currency_symbol

    def _cell(self, section: ReportSection, column: str, value: Any) -> str:
        if value is None:
            return ""
        if column in section.currency_columns:
            return format_currency(value, self._currency_symbol)
        if isinstance(value, datetime):
            return value.strftime(DATE_FORMAT)
        return str(value)

    def serialize(self, document: ReportDocument) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self._separator, lineterminator="\n")
        for index, section in enumerate(document.sections):
            if index:
                writer.writerow([])
            writer.writerow([section.title])
            writer.writerow(section.columns)
            for row in section.rows:
                writer.writerow(
                    [self._cell(section, column, value) for column, value in zip(section.columns, row)]
                )
        return buffer.getvalue().encode("utf-8-sig")


class WorkbookSerializer:
    """Excel workbook with one styled sheet per section."""

    extension = "xlsx"
    media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    _HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    _HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)
    _HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
    _THIN = Side(style="thin", color="1F3864")
    _HEADER_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)

    def __init__(self, *, currency_symbol: str = "R$", max_column_width: int = 50) -> None:
        self._currency_format = f'"{currency_symbol}" #,##0.00'
        self._max_column_width = max_column_width

    @staticmethod
    def _value(value: Any) -> Any:
        if isinstance(value, Decimal):
            return float(value)
        if isinstance(value, datetime) and value.tzinfo is not None:
            # Excel has no time zone support; keep the local wall-clock time.
            return value.replace(tzinfo=None)
        return value

    def _write_section(self, workbook: Workbook, section: ReportSection) -> None:
        worksheet = workbook.create_sheet(title=section.title[:31])
        worksheet.append(list(section.columns))
        for row in section.rows:
            worksheet.append([self._value(value) for value in row])

        for cell in worksheet[1]:
            cell.fill = self._HEADER_FILL
            cell.font = self._HEADER_FONT
            cell.alignment = self._HEADER_ALIGNMENT
            cell.border = self._HEADER_BORDER
        worksheet.freeze_panes = "A2"

        for position, column in enumerate(section.columns, start=1):
            letter = get_column_letter(position)
            if column in section.currency_columns:
                number_format = self._currency_format
            elif column in section.date_columns:
                number_format = WORKBOOK_DATE_FORMAT
            else:
                number_format = None
            max_length = len(column)
            for (cell,) in worksheet.iter_rows(min_row=2, min_col=position, max_col=position):
                if number_format is not None:
                    cell.number_format = number_format
                if cell.value is None:
                    continue
                if column in section.currency_columns:
                    shown = format_currency(cell.value)
                elif isinstance(cell.value, datetime):
                    shown = cell.value.strftime(DATE_FORMAT)
                else:
                    shown = str(cell.value)
                max_length = max(max_length, len(shown))
            worksheet.column_dimensions[letter].width = min(max_length + 2, self._max_column_width)

    def serialize(self, document: ReportDocument) -> bytes:
        workbook = Workbook()
        workbook.remove(workbook.active)
        for section in document.sections:
            self._write_section(workbook, section)
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()


def get_serializer(
    output_format: str | ReportFormat,
    *,
    currency_symbol: str = "R$",
    max_column_width: int = 50,
) -> ReportSerializer:
    fmt = ReportFormat.parse(output_format)
    if fmt is ReportFormat.WORKBOOK:
        return WorkbookSerializer(currency_symbol=currency_symbol, max_column_width=max_column_width)
    return DelimitedTextSerializer(currency_symbol=currency_symbol)


__all__ = [
    "DelimitedTextSerializer",
    "ReportFormat",
    "ReportSerializer",
    "UnknownReportFormatError",
    "WorkbookSerializer",
    "format_currency",
    "get_serializer",
]
