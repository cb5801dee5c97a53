"""Formatters are applied to the range a writer has already written, they never affect the layout.

:data:`EMPTY` does nothing and :func:`formatter`/:func:`value_formatter` lift plain functions. The rest of the
formatters here need a :class:`~xlsxwriter_cellwriters.document.FormattableDocument` and do nothing for an empty
range, which is what a collapsed optional writer occupies."""

from abc import abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from attr import attrib, attrs, evolve

from .document import Document, FormattableDocument
from .errors import CompositionError
from .formats import FormatDict, FormatsNamespace as F
from .geometry import CellRange

AnyFormatter = Union['Formatter', 'ValueFormatter']


class Formatter(object):
    """A side effect over a written range."""

    @abstractmethod
    def __call__(self, doc: Document, target: CellRange) -> None:
        raise NotImplementedError

    def then(self, other: AnyFormatter) -> AnyFormatter:
        """Apply `other` after this formatter."""
        return chain(self, other)


class ValueFormatter(object):
    """A side effect over a written range that also receives the value that has been written there."""

    @abstractmethod
    def __call__(self, doc: Document, target: CellRange, value: Any) -> None:
        raise NotImplementedError

    def then(self, other: AnyFormatter) -> 'ValueFormatter':
        return chain(self, other)


@attrs(auto_attribs=True, frozen=True)
class Empty(Formatter):
    def __call__(self, doc, target):
        pass


EMPTY = Empty()


@attrs(auto_attribs=True, frozen=True)
class Chain(Formatter):
    formatters: Tuple[Formatter, ...] = attrib(converter=tuple)

    def __call__(self, doc, target):
        for formatter_ in self.formatters:
            formatter_(doc, target)


@attrs(auto_attribs=True, frozen=True)
class ValueChain(ValueFormatter):
    formatters: Tuple[AnyFormatter, ...] = attrib(converter=tuple)

    def __call__(self, doc, target, value):
        for formatter_ in self.formatters:
            if isinstance(formatter_, ValueFormatter):
                formatter_(doc, target, value)
            else:
                formatter_(doc, target)


def chain(*formatters: AnyFormatter) -> AnyFormatter:
    """Apply `formatters` in order. The result is a :class:`ValueFormatter` if any of them is one."""
    flattened = []
    for formatter_ in formatters:
        if isinstance(formatter_, (Chain, ValueChain)):
            flattened.extend(formatter_.formatters)
        elif isinstance(formatter_, Empty):
            continue
        elif isinstance(formatter_, (Formatter, ValueFormatter)):
            flattened.append(formatter_)
        else:
            raise CompositionError(f'{formatter_!r} is neither a Formatter nor a ValueFormatter')

    if any(isinstance(formatter_, ValueFormatter) for formatter_ in flattened):
        return ValueChain(flattened)
    if not flattened:
        return EMPTY
    if len(flattened) == 1:
        return flattened[0]
    return Chain(flattened)


@attrs(auto_attribs=True, frozen=True)
class FunctionFormatter(Formatter):
    function: Callable[[Document, CellRange], None]

    def __call__(self, doc, target):
        self.function(doc, target)


@attrs(auto_attribs=True, frozen=True)
class FunctionValueFormatter(ValueFormatter):
    function: Callable[[Document, CellRange, Any], None]

    def __call__(self, doc, target, value):
        self.function(doc, target, value)


def formatter(function: Callable[[Document, CellRange], None]) -> FunctionFormatter:
    """Turn a function of ``(doc, target_range)`` into a :class:`Formatter`."""
    return FunctionFormatter(function)


def value_formatter(function: Callable[[Document, CellRange, Any], None]) -> FunctionValueFormatter:
    """Turn a function of ``(doc, target_range, value)`` into a :class:`ValueFormatter`."""
    return FunctionValueFormatter(function)


@attrs(auto_attribs=True, frozen=True)
class ImposeFormatter(Formatter):
    """Merge `format_` into the format of every cell of the range, including blank ones."""
    format_: FormatDict = attrib(factory=FormatDict, converter=FormatDict)

    def with_format(self, format_: Mapping[str, Any]) -> 'ImposeFormatter':
        return evolve(self, format_=self.format_ | format_)

    def __call__(self, doc: FormattableDocument, target):
        for index in target.cells():
            doc.impose_format(index.row, index.col, self.format_)


@attrs(auto_attribs=True, frozen=True)
class BoxBorderFormatter(Formatter):
    """Draw a box around the range using `(right|top|left|bottom)_format`."""
    right_format: FormatDict = attrib(default=F.right_border, converter=FormatDict)
    top_format: FormatDict = attrib(default=F.top_border, converter=FormatDict)
    left_format: FormatDict = attrib(default=F.left_border, converter=FormatDict)
    bottom_format: FormatDict = attrib(default=F.bottom_border, converter=FormatDict)

    def with_right_format(self, format_: Mapping[str, Any]):
        return evolve(self, right_format=format_)

    def with_top_format(self, format_: Mapping[str, Any]):
        return evolve(self, top_format=format_)

    def with_left_format(self, format_: Mapping[str, Any]):
        return evolve(self, left_format=format_)

    def with_bottom_format(self, format_: Mapping[str, Any]):
        return evolve(self, bottom_format=format_)

    def __call__(self, doc: FormattableDocument, target):
        if target.is_empty:
            return

        first, last = target.top_left, target.bottom_right
        impositions: Dict[Tuple[int, int], FormatDict] = {}
        for index in target.cells():
            format_ = FormatDict()
            if index.row == first.row:
                format_ |= self.top_format
            if index.row == last.row:
                format_ |= self.bottom_format
            if index.col == first.col:
                format_ |= self.left_format
            if index.col == last.col:
                format_ |= self.right_format
            if format_:
                impositions[(index.row, index.col)] = format_

        for (row, col), format_ in impositions.items():
            doc.impose_format(row, col, format_)


@attrs(auto_attribs=True, frozen=True)
class NamedRangeFormatter(Formatter):
    """Give the range a workbook-level `name`."""
    name: str = "__DEFAULT"

    def with_name(self, name: str):
        return evolve(self, name=name)

    def __call__(self, doc: FormattableDocument, target):
        if target.is_empty:
            return
        last = target.bottom_right
        doc.define_name(self.name, target.top_left.row, target.top_left.col, last.row, last.col)


@attrs(auto_attribs=True, frozen=True)
class ConditionalFormatter(Formatter):
    """Add a conditional format to the range, parametrized :func:`with_options`.

    To configure the format, you can either use :func:`with_format` or specify the :class:`FormatDict` as
    format key in options. Do not use both at the same time however."""
    options: Dict[str, Any] = attrib(factory=dict, repr=False, hash=False)
    format_: Optional[FormatDict] = None

    def with_options(self, options: Mapping[str, Any]):
        return evolve(self, options={**self.options, **options})

    def with_format(self, format_: Mapping[str, Any]):
        return evolve(self, format_=FormatDict(self.format_ or {}) | format_)

    def __call__(self, doc: FormattableDocument, target):
        if self.format_ and self.options.get('format'):
            raise ValueError('Both format key and format field are specified, use only one of them.')
        if target.is_empty:
            return

        options = {
            key: value
            for key, value in self.options.items()
            if key != 'format'
        }
        last = target.bottom_right
        doc.conditional_format(
            target.top_left.row, target.top_left.col, last.row, last.col,
            options,
            self.format_ or self.options.get('format'),
        )


@attrs(auto_attribs=True, frozen=True)
class RowHeightFormatter(Formatter):
    """Set the height of every row the range spans :func:`with_size`."""
    size: float = 15.0

    def with_size(self, size: float):
        return evolve(self, size=float(size))

    def __call__(self, doc: FormattableDocument, target):
        for row in range(target.top_left.row, target.top_left.row + target.size.height):
            doc.set_row_height(row, self.size)


@attrs(auto_attribs=True, frozen=True)
class ColumnWidthFormatter(Formatter):
    """Set the width of every column the range spans :func:`with_size`."""
    size: float = 8.43

    def with_size(self, size: float):
        return evolve(self, size=float(size))

    def __call__(self, doc: FormattableDocument, target):
        for col in range(target.top_left.col, target.top_left.col + target.size.width):
            doc.set_column_width(col, self.size)


ImposeFormat = ImposeFormatter()
DrawBoxBorder = BoxBorderFormatter()
DefineNamedRange = NamedRangeFormatter()
AddConditionalFormat = ConditionalFormatter()
SetRowHeight = RowHeightFormatter()
SetColumnWidth = ColumnWidthFormatter()
