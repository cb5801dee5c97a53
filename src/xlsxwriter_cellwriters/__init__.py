"""Writer combinators for XlsxWriter, placing structured values into a worksheet without dealing with absolute
coordinates: every writer reports the size of the block it wrote, so writers can be laid out `top_down` and
`left_right` of each other, repeated over sequences and followed by formatters, and a `table` assembles a header
row and a row per item out of columns."""

from . import document, errors, formats, formatters, geometry, table, utils, writers

from .geometry import CellIndex, CellRange, CellSize
from .table import Table, add_table, build
from .utils import WorkbookPair, WorksheetDocument

__all__ = [
    'document', 'errors', 'formats', 'formatters', 'geometry', 'table', 'utils', 'writers',
    'CellIndex', 'CellRange', 'CellSize', 'Table', 'add_table', 'build', 'WorkbookPair', 'WorksheetDocument',
]
