"""Tables: a header row followed by one row for every item of a source sequence.

Examples:
    >>> from xlsxwriter_cellwriters.table import build
    >>> table = (
    ...     build([{'name': 'A', 'n': 1}, {'name': 'B', 'n': 2}])
    ...     .with_column('Name', lambda r: r['name'])
    ...     .with_column('N', lambda r: r['n'])
    ... )
    >>> table.write(doc)  # doctest: +SKIP
    CellSize(height=3, width=2)
"""

import logging
from typing import Callable, Generic, Iterable, Optional, Tuple, TypeVar, Union
from warnings import warn

from attr import attrib, attrs, evolve

from .document import Document, ScalarKind
from .errors import CompositionError
from .formatters import EMPTY, AnyFormatter, Formatter, ValueFormatter
from .geometry import CellIndex, CellSize
from .writers import HORIZONTAL, ValueChain, ValueWriter, Writer, const, left_right_all, maybe_cell, top_down

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _ensure_formatter(formatter):
    if not isinstance(formatter, (Formatter, ValueFormatter)):
        raise CompositionError(f'{formatter!r} is neither a Formatter nor a ValueFormatter')
    return formatter


@attrs(auto_attribs=True, frozen=True)
class Column(Generic[T]):
    """A header writer and the writer of this column's cell for every item."""
    header: Writer
    writer: ValueWriter[T]


@attrs(auto_attribs=True, frozen=True)
class Table(Generic[T]):
    """An immutable table builder, every configuration method returns a new table.

    Columns are laid out left to right in the order they were added.

    Attributes:
        source: The items, one row each
        columns: Header and cell writers of every column
        table_format: Formatter of the whole table, a value formatter receives the items
        header_format: Formatter of the header row
        row_format: Formatter of every data row, a value formatter receives the item of the row
    """
    source: Tuple[T, ...] = attrib(converter=tuple)
    columns: Tuple[Column[T], ...] = attrib(default=(), converter=tuple)
    table_format: AnyFormatter = EMPTY
    header_format: Formatter = EMPTY
    row_format: AnyFormatter = EMPTY

    def with_column(
            self,
            header: Union[str, Writer],
            selector: Optional[Callable[[T], object]] = None,
            writer: Optional[ValueWriter] = None,
            kind: Union[ScalarKind, type, None] = None,
    ) -> 'Table[T]':
        """Add a column to the right of the existing ones.

        Parameters:
            header: Header text, or a writer for the header cells
            selector: What to write for an item, the item itself if omitted
            writer:
                The writer of the selected value. If omitted, a single cell is written, perhaps of `kind`,
                and a None leaves it blank so the rest of the row stays in place.
            kind: The kind of the values written by the default writer
        """
        header_writer = const(header) if isinstance(header, str) else header
        if not isinstance(header_writer, Writer):
            raise CompositionError(f'Column header must be a string or a Writer, got {header!r}')

        if writer is None:
            writer = maybe_cell(kind)
        elif kind is not None:
            raise CompositionError('`kind` only applies to the default cell writer')
        elif not isinstance(writer, ValueWriter):
            raise CompositionError(f'Column writer must be a ValueWriter, got {writer!r}')

        row_writer = writer.select(selector) if selector is not None else writer
        return evolve(self, columns=(*self.columns, Column(header_writer, row_writer)))

    def with_format(self, formatter: AnyFormatter) -> 'Table[T]':
        return evolve(self, table_format=_ensure_formatter(formatter))

    def with_header_format(self, formatter: Formatter) -> 'Table[T]':
        if isinstance(formatter, ValueFormatter):
            raise CompositionError('The header row has no value to pass to a ValueFormatter')
        return evolve(self, header_format=_ensure_formatter(formatter))

    def with_row_format(self, formatter: AnyFormatter) -> 'Table[T]':
        return evolve(self, row_format=_ensure_formatter(formatter))

    @property
    def header_writer(self) -> Writer:
        return left_right_all(column.header for column in self.columns).with_format(self.header_format)

    @property
    def row_writer(self) -> ValueWriter[T]:
        return ValueChain(HORIZONTAL, (column.writer for column in self.columns)).with_format(self.row_format)

    @property
    def content_writer(self) -> ValueWriter[Iterable[T]]:
        return self.row_writer.many_down()

    @property
    def sequence_writer(self) -> ValueWriter[Iterable[T]]:
        """The whole table as a writer of any sequence of items."""
        if not self.columns:
            warn("This table has no columns, it will not occupy any cells.")
        logger.debug("Assembling a table of %d columns", len(self.columns))
        return top_down(self.header_writer, self.content_writer).with_format(self.table_format)

    @property
    def writer(self) -> Writer:
        """The whole table with `source` as its items."""
        return self.sequence_writer.bind(self.source)

    def write(self, doc: Document, row: int = 0, col: int = 0) -> CellSize:
        return self.writer(doc, CellIndex(row, col))


def build(source: Iterable[T]) -> Table[T]:
    """Start a table with a row for every item of `source`."""
    return Table(source)


def add_table(doc: Document, row: int, col: int, table: Table) -> CellSize:
    """Write `table` into `doc`, its top left corner at `row` and `col`."""
    return table.write(doc, row, col)
