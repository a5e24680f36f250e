from __future__ import annotations

import io
from typing import Any, Optional, Protocol, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..core.enums import AttendanceStatus

HEADER_FILL = "4472C4"
SHADED_FILL = "F2F2F2"
STATUS_COLORS = {
    AttendanceStatus.PRESENT: "008000",
    AttendanceStatus.ABSENT: "FF0000",
    AttendanceStatus.LATE: "FFA500",
    AttendanceStatus.EXCUSED: "0000FF",
}
# Width counted for an empty cell when auto-fitting columns.
EMPTY_CELL_WIDTH = 10


class ReportBuilder(Protocol):
    """Minimal tabular report capability used by the export service."""

    def add_title(self, text: str) -> None:
        raise NotImplementedError

    def add_subtitle(self, text: str) -> None:
        raise NotImplementedError

    def add_blank_row(self) -> None:
        raise NotImplementedError

    def add_header(self, values: Sequence[str]) -> None:
        raise NotImplementedError

    def add_row(
        self,
        values: Sequence[Any],
        *,
        shaded: bool = False,
        status: Optional[AttendanceStatus] = None,
        status_column: Optional[int] = None,
    ) -> None:
        raise NotImplementedError

    def add_summary(self, title: str, items: Sequence[Tuple[str, Any]]) -> None:
        raise NotImplementedError

    def finalize(self) -> bytes:
        raise NotImplementedError


class ExcelReportBuilder:
    """ReportBuilder on openpyxl: merged title rows, styled header, bordered data region."""

    media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    extension = "xlsx"

    def __init__(self, *, sheet_title: str, columns: int, max_column_width: int, bordered: bool = True):
        self._wb = Workbook()
        self._ws = self._wb.active
        self._ws.title = sheet_title
        self._columns = int(columns)
        self._max_width = int(max_column_width)
        self._bordered = bordered
        self._thin = Side(style="thin")
        self._header_row: Optional[int] = None
        self._last_data_row: Optional[int] = None
        self._row = 0
        self._layout_done = False

    @property
    def worksheet(self):
        return self._ws

    def _next_row(self) -> int:
        self._row += 1
        return self._row

    def _merged_line(self, text: str, font: Font) -> None:
        row = self._next_row()
        cell = self._ws.cell(row=row, column=1, value=text)
        cell.font = font
        cell.alignment = Alignment(horizontal="center")
        self._ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=self._columns)

    def add_title(self, text: str) -> None:
        self._merged_line(text, Font(size=16, bold=True))

    def add_subtitle(self, text: str) -> None:
        self._merged_line(text, Font(size=12, italic=True))

    def add_blank_row(self) -> None:
        self._next_row()

    def add_header(self, values: Sequence[str]) -> None:
        row = self._next_row()
        fill = PatternFill(start_color=HEADER_FILL, end_color=HEADER_FILL, fill_type="solid")
        for col, value in enumerate(values, 1):
            cell = self._ws.cell(row=row, column=col, value=value)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = fill
            cell.alignment = Alignment(horizontal="center", vertical="center")
        self._header_row = row
        self._last_data_row = row

    def add_row(
        self,
        values: Sequence[Any],
        *,
        shaded: bool = False,
        status: Optional[AttendanceStatus] = None,
        status_column: Optional[int] = None,
    ) -> None:
        row = self._next_row()
        fill = PatternFill(start_color=SHADED_FILL, end_color=SHADED_FILL, fill_type="solid") if shaded else None
        for col, value in enumerate(values, 1):
            cell = self._ws.cell(row=row, column=col, value=value)
            cell.alignment = Alignment(vertical="center")
            if fill is not None:
                cell.fill = fill
        if status is not None and status_column is not None:
            self._ws.cell(row=row, column=status_column).font = Font(bold=True, color=STATUS_COLORS[status])
        self._last_data_row = row

    def add_summary(self, title: str, items: Sequence[Tuple[str, Any]]) -> None:
        # Column widths and borders cover the table only, so fix them before the summary lands.
        self._apply_table_layout()
        self.add_blank_row()
        self._ws.cell(row=self._next_row(), column=1, value=title).font = Font(bold=True, size=14)
        for label, value in items:
            row = self._next_row()
            self._ws.cell(row=row, column=1, value=label).font = Font(bold=True)
            self._ws.cell(row=row, column=2, value=value).font = Font(bold=True)

    def _apply_table_layout(self) -> None:
        if self._layout_done:
            return
        self._layout_done = True

        last_row = self._last_data_row or self._row
        for col in range(1, self._columns + 1):
            longest = 0
            for row in range(1, last_row + 1):
                value = self._ws.cell(row=row, column=col).value
                length = len(str(value)) if value not in (None, "") else EMPTY_CELL_WIDTH
                longest = max(longest, length)
            self._ws.column_dimensions[get_column_letter(col)].width = min(longest + 2, self._max_width)

        if self._header_row is None or not self._bordered:
            return
        border = Border(left=self._thin, right=self._thin, top=self._thin, bottom=self._thin)
        for row in range(self._header_row, last_row + 1):
            for col in range(1, self._columns + 1):
                self._ws.cell(row=row, column=col).border = border

    def finalize(self) -> bytes:
        self._apply_table_layout()
        out = io.BytesIO()
        self._wb.save(out)
        return out.getvalue()
