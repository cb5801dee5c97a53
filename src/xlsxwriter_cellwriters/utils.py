import logging
from math import isfinite
from typing import Any, Dict, Mapping, Optional, Tuple
from warnings import warn

from attr import Factory, attrib, attrs
from xlsxwriter import Workbook
from xlsxwriter.utility import xl_range_formula
from xlsxwriter.worksheet import Worksheet

from .document import Scalar, ScalarKind
from .errors import DocumentWriteError, IllegalCoordinatesError
from .formats import FormatDict, FormatHandler, FormatsNamespace as F

logger = logging.getLogger(__name__)

Coords = Tuple[int, int]

# 2^20 and 2^14 are Excel limits for the amount of row and columns respectively.
MAX_ROWS = 2 ** 20
MAX_COLS = 2 ** 14


@attrs(auto_attribs=True)
class WorkbookPair(object):
    """A pair used to bundle a :class:`FormatHandler` and a :ref:`Workbook <workbook>`, along with the formats
    every worksheet created from it starts with."""
    wb: Workbook
    fmt: FormatHandler
    base_format: FormatDict = attrib(default=F.default_font, converter=FormatDict)
    datetime_format: FormatDict = attrib(default=F.datetime, converter=FormatDict)

    def add_worksheet(self, name: Optional[str] = None) -> 'WorksheetDocument':
        """Create a worksheet and bind it into a :class:`WorksheetDocument`"""
        return WorksheetDocument(
            self.wb,
            self.wb.add_worksheet(name),
            self.fmt,
            self.base_format,
            self.datetime_format,
        )

    @classmethod
    def from_wb(
            cls,
            wb: Workbook,
            base_format: Mapping[str, Any] = F.default_font,
            datetime_format: Mapping[str, Any] = F.datetime,
    ) -> 'WorkbookPair':
        """Bind a :class:`Workbook` into a :class:`WorkbookPair`"""
        if getattr(wb, 'constant_memory', False):
            warn("Workbooks in constant_memory mode drop formats imposed on rows that have already been flushed.")
        return cls(wb, FormatHandler(wb), base_format, datetime_format)


@attrs(auto_attribs=True)
class WorksheetDocument(object):
    """A document writing into an XlsxWriter worksheet.

    Every cell is written with `base_format`, datetime cells are also merged with `datetime_format`.
    The values written so far are kept, so that formats imposed later can be merged into the cell format and the
    cell rewritten, since XlsxWriter has no way to change the format of a cell that has already been written.

    Attributes:
        wb: The workbook `ws` belongs to, used to define names
        ws: The target worksheet
        fmt: The format handler of `wb`
    """
    wb: Workbook
    ws: Worksheet
    fmt: FormatHandler
    base_format: FormatDict = attrib(default=F.default_font, converter=FormatDict)
    datetime_format: FormatDict = attrib(default=F.datetime, converter=FormatDict)
    _values: Dict[Coords, Tuple[ScalarKind, Scalar]] = Factory(dict)
    _formats: Dict[Coords, FormatDict] = Factory(dict)

    @staticmethod
    def _check_coords(row: int, col: int):
        if row not in range(0, MAX_ROWS) or col not in range(0, MAX_COLS):
            raise IllegalCoordinatesError('Illegal coords have been reached, this is not allowed.', target=(row, col))

    def value_at(self, row: int, col: int) -> Optional[Scalar]:
        """The value last written at `row` and `col`, if any."""
        entry = self._values.get((row, col))
        return entry and entry[1]

    def format_at(self, row: int, col: int) -> FormatDict:
        """The complete format the cell at `row` and `col` is written with."""
        format_ = self.base_format
        entry = self._values.get((row, col))
        if entry is not None and entry[0] is ScalarKind.DATETIME:
            format_ = format_ | self.datetime_format
        return format_ | self._formats.get((row, col), FormatDict())

    def _write(self, row: int, col: int):
        format_ = self.fmt.verify_format(self.format_at(row, col))
        entry = self._values.get((row, col))

        if entry is None:
            return_code = self.ws.write_blank(row, col, None, format_)
            value = None
        else:
            kind, value = entry
            if kind is ScalarKind.TEXT:
                return_code = self.ws.write_string(row, col, value, format_)
            elif kind is ScalarKind.DATETIME:
                return_code = self.ws.write_datetime(row, col, value, format_)
            else:
                return_code = self.ws.write_number(row, col, value, format_)

        if return_code == -1:
            raise DocumentWriteError('Write failed because the cell is out of worksheet bounds', (row, col), value)

        if return_code == -2:
            raise DocumentWriteError('Write failed because the string is longer than 32k characters', (row, col))

    def _check_value(self, row: int, col: int, kind: ScalarKind, value: Scalar):
        if kind is ScalarKind.TEXT and len(value) > self.ws.xls_strmax:
            raise DocumentWriteError('Write failed because the string is longer than 32k characters', (row, col))

        if kind is ScalarKind.FLOAT and not isfinite(value) and not self.ws.nan_inf_to_errors:
            raise DocumentWriteError(
                'NaN and infinity can only be written when the workbook has the nan_inf_to_errors option',
                (row, col),
                value
            )

    def set_cell_value(self, row: int, col: int, value: Scalar) -> None:
        """Write `value` at `row` and `col`, nothing is written or remembered if it is rejected."""
        self._check_coords(row, col)
        kind = ScalarKind.of(value)
        self._check_value(row, col, kind, value)
        self._values[(row, col)] = (kind, value)
        self._write(row, col)

    def impose_format(self, row: int, col: int, format_: Mapping[str, Any]) -> None:
        """Merge `format_` into the format of the cell at `row` and `col`, writing a blank cell if it is empty."""
        self._check_coords(row, col)
        if (row, col) not in self._values:
            logger.debug("Imposing a format on blank cell (%d, %d)", row, col)
        self._formats[(row, col)] = self._formats.get((row, col), FormatDict()) | format_
        self._write(row, col)

    def define_name(self, name: str, first_row: int, first_col: int, last_row: int, last_col: int) -> None:
        formula = xl_range_formula(self.ws.name, first_row, first_col, last_row, last_col)
        if self.wb.define_name(name, f'={formula}') == -1:
            raise DocumentWriteError(f'Could not define name {name!r}', (first_row, first_col))

    def conditional_format(
            self,
            first_row: int,
            first_col: int,
            last_row: int,
            last_col: int,
            options: Mapping[str, Any],
            format_: Optional[Mapping[str, Any]] = None,
    ) -> None:
        options = dict(options)
        if format_:
            options['format'] = self.fmt.verify_format(self.base_format | format_)

        if self.ws.conditional_format(first_row, first_col, last_row, last_col, options) == -2:
            raise DocumentWriteError(f"Invalid parameter or options: {options}", (first_row, first_col))

    def set_row_height(self, row: int, height: float) -> None:
        self.ws.set_row(row, height)

    def set_column_width(self, col: int, width: float) -> None:
        self.ws.set_column(col, col, width)
