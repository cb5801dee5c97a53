"""Writers and the combinators composing them.

A writer puts some content into a document starting at a target cell and reports the :class:`CellSize` it occupied.
Since the reported size is the only way a composition learns where the next writer starts, every writer here
reports exactly the rectangle it may have written into.

There are two flavours of writers:

* :class:`Writer`, called as ``writer(doc, target)``, writes fixed content;
* :class:`ValueWriter`, called as ``writer(doc, target, value)``, writes content depending on `value`.

All of them are frozen `attrs` classes, so a composition is a plain tree of values that may be inspected, compared
and reused with any number of documents.

Examples:
    >>> from xlsxwriter_cellwriters.geometry import CellIndex
    >>> from xlsxwriter_cellwriters.writers import cell, const
    >>> header = const("Name").then_right(const("Score"))
    >>> row = cell(str).select(lambda r: r[0]).then_right(cell(int).select(lambda r: r[1]))
    >>> table = header.then_down(row.many_down())
    >>> table(doc, CellIndex(0, 0), [("Alpha", 1), ("Beta", 2)])  # doctest: +SKIP
    CellSize(height=3, width=2)
"""

from abc import abstractmethod
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, Tuple, TypeVar, Union

from attr import attrib, attrs

from .document import Document, ScalarKind
from .errors import CompositionError
from .formatters import Formatter, ValueFormatter
from .geometry import CellIndex, CellRange, CellSize

T = TypeVar('T')
R = TypeVar('R')

AnyWriter = Union['Writer', 'ValueWriter']


@attrs(auto_attribs=True, frozen=True)
class Axis(object):
    """A direction of composition: how sizes are combined and where the next writer starts."""
    name: str
    combine: Callable[[CellSize, CellSize], CellSize] = attrib(repr=False)
    shift: Callable[[CellIndex, CellSize], CellIndex] = attrib(repr=False)

    def fold(
            self,
            doc: Document,
            target: CellIndex,
            steps: Iterable[Callable[[Document, CellIndex], CellSize]],
    ) -> CellSize:
        """Run `steps` one after another, each one starting right after everything written so far."""
        size = CellSize.EMPTY
        for step in steps:
            size = self.combine(size, step(doc, self.shift(target, size)))
        return size


VERTICAL = Axis('vertical', CellSize.add_height_max_width, CellIndex.down)
HORIZONTAL = Axis('horizontal', CellSize.add_width_max_height, CellIndex.right)


def _resolve_kind(kind):
    return kind if kind is None else ScalarKind.for_type(kind)


def _ensure_size(size, writer) -> CellSize:
    if not isinstance(size, CellSize):
        raise CompositionError(f'Writer {writer!r} returned {size!r} instead of a CellSize')
    return size


def _ensure_writer(obj):
    if not isinstance(obj, (Writer, ValueWriter)):
        raise CompositionError(f'{obj!r} is neither a Writer nor a ValueWriter')
    return obj


def _reusable(value: Any) -> Any:
    # a one-shot iterator would be exhausted by the first writer that consumes it
    if isinstance(value, Iterator):
        return tuple(value)
    return value


def _invoke(writer: AnyWriter, doc: Document, target: CellIndex, value: Any) -> CellSize:
    if isinstance(writer, ValueWriter):
        return writer(doc, target, value)
    return writer(doc, target)


class Writer(object):
    """A writer of fixed content."""

    @abstractmethod
    def __call__(self, doc: Document, target: CellIndex) -> CellSize:
        raise NotImplementedError

    def then_down(self, other: AnyWriter) -> AnyWriter:
        """Place `other` right below this writer."""
        return top_down(self, other)

    def then_right(self, other: AnyWriter) -> AnyWriter:
        """Place `other` right after this writer."""
        return left_right(self, other)

    def with_format(self, formatter: Formatter) -> 'Writer':
        """Apply `formatter` to the range this writer occupied after every write."""
        return with_format(self, formatter)


class ValueWriter(Generic[T]):
    """A writer of content that depends on a value of type `T`."""

    @abstractmethod
    def __call__(self, doc: Document, target: CellIndex, value: T) -> CellSize:
        raise NotImplementedError

    def select(self, selector: Callable[[R], T]) -> 'ValueWriter[R]':
        """Adapt this writer to values of another type, `selector` turns the new value into the one we write."""
        return select(self, selector)

    def bind(self, value: T) -> Writer:
        """Always write `value`."""
        return bind(self, value)

    def optional(self) -> 'ValueWriter[Optional[T]]':
        """Write nothing and occupy nothing when the value is None."""
        return optional(self)

    def then_down(self, other: AnyWriter) -> 'ValueWriter[T]':
        return top_down(self, other)

    def then_right(self, other: AnyWriter) -> 'ValueWriter[T]':
        return left_right(self, other)

    def many_down(self) -> 'ValueWriter[Iterable[T]]':
        """Write every element of an iterable, one below another."""
        return top_down_many(self)

    def many_right(self) -> 'ValueWriter[Iterable[T]]':
        """Write every element of an iterable, one after another."""
        return left_right_many(self)

    def with_format(self, formatter: Union[Formatter, ValueFormatter]) -> 'ValueWriter[T]':
        return with_format(self, formatter)


@attrs(auto_attribs=True, frozen=True)
class Cell(ValueWriter[T]):
    """Write a scalar value into the target cell.

    If `kind` is None, the kind is decided by each value, otherwise every value must be of this `kind`."""
    kind: Optional[ScalarKind] = attrib(default=None, converter=_resolve_kind)

    def check(self, value: Any) -> Any:
        """Raise :class:`UnsupportedValueKind` if we cannot write `value`."""
        if self.kind is None:
            ScalarKind.of(value)
            return value
        return self.kind.check(value)

    def __call__(self, doc, target, value):
        doc.set_cell_value(target.row, target.col, self.check(value))
        return CellSize.ONE


@attrs(auto_attribs=True, frozen=True)
class CellObject(ValueWriter[Any]):
    """Write the string representation of any value into the target cell."""

    def __call__(self, doc, target, value):
        doc.set_cell_value(target.row, target.col, str(value))
        return CellSize.ONE


@attrs(auto_attribs=True, frozen=True)
class MaybeCell(ValueWriter[Optional[T]]):
    """Like :class:`Cell`, but None keeps the cell blank while still occupying it."""
    cell: Cell = attrib(factory=Cell)

    def __call__(self, doc, target, value):
        if value is None:
            return CellSize.ONE
        return self.cell(doc, target, value)


@attrs(auto_attribs=True, frozen=True)
class Bound(Writer):
    """A value writer with its value supplied ahead of time."""
    writer: ValueWriter
    value: Any

    def __call__(self, doc, target):
        return self.writer(doc, target, self.value)


@attrs(auto_attribs=True, frozen=True)
class Selected(ValueWriter[R]):
    """A value writer fed with ``selector(value)``."""
    writer: ValueWriter
    selector: Callable[[R], Any]

    def __call__(self, doc, target, value):
        return self.writer(doc, target, self.selector(value))


@attrs(auto_attribs=True, frozen=True)
class Collapsible(ValueWriter[Optional[T]]):
    """A value writer that is skipped entirely and occupies (0, 0) when the value is None."""
    writer: ValueWriter[T]

    def __call__(self, doc, target, value):
        if value is None:
            return CellSize.EMPTY
        return self.writer(doc, target, value)


@attrs(auto_attribs=True, frozen=True)
class Chain(Writer):
    """Fixed writers laid out one after another along `axis`."""
    axis: Axis
    writers: Tuple[Writer, ...] = attrib(converter=tuple)

    def __call__(self, doc, target):
        return self.axis.fold(doc, target, self.writers)


@attrs(auto_attribs=True, frozen=True)
class ValueChain(ValueWriter[T]):
    """Writers laid out one after another along `axis`, every value writer among them receiving the same value."""
    axis: Axis
    writers: Tuple[AnyWriter, ...] = attrib(converter=tuple)

    def __call__(self, doc, target, value):
        value = _reusable(value)
        return self.axis.fold(doc, target, (
            lambda doc_, target_, writer=writer: _invoke(writer, doc_, target_, value)
            for writer in self.writers
        ))


@attrs(auto_attribs=True, frozen=True)
class Many(ValueWriter[Iterable[T]]):
    """A value writer applied to every element of an iterable along `axis`."""
    axis: Axis
    writer: ValueWriter[T]

    def __call__(self, doc, target, value):
        return self.axis.fold(doc, target, (
            lambda doc_, target_, item=item: self.writer(doc_, target_, item)
            for item in value
        ))


@attrs(auto_attribs=True, frozen=True)
class Formatted(Writer):
    """A writer followed by `formatter` over the exact range it occupied."""
    writer: Writer
    formatter: Formatter

    def __call__(self, doc, target):
        size = self.writer(doc, target)
        self.formatter(doc, CellRange(target, size))
        return size


@attrs(auto_attribs=True, frozen=True)
class ValueFormatted(ValueWriter[T]):
    """A value writer followed by `formatter` over the exact range it occupied.
    Value formatters receive the value that has been written."""
    writer: ValueWriter[T]
    formatter: Union[Formatter, ValueFormatter]

    def __call__(self, doc, target, value):
        if not isinstance(self.formatter, ValueFormatter):
            size = self.writer(doc, target, value)
            self.formatter(doc, CellRange(target, size))
            return size

        value = _reusable(value)
        size = self.writer(doc, target, value)
        self.formatter(doc, CellRange(target, size), value)
        return size


@attrs(auto_attribs=True, frozen=True)
class FunctionWriter(Writer):
    """A fixed writer backed by a plain function of ``(doc, target)``."""
    function: Callable[[Document, CellIndex], CellSize]

    def __call__(self, doc, target):
        return _ensure_size(self.function(doc, target), self)


@attrs(auto_attribs=True, frozen=True)
class FunctionValueWriter(ValueWriter[T]):
    """A value writer backed by a plain function of ``(doc, target, value)``."""
    function: Callable[[Document, CellIndex, T], CellSize]

    def __call__(self, doc, target, value):
        return _ensure_size(self.function(doc, target, value), self)


def cell(kind: Union[ScalarKind, type, None] = None) -> Cell:
    """A writer of a single scalar, occupying (1, 1).

    `kind` is either a :class:`ScalarKind` or one of `str`, `int`, `float`, `datetime.date`, `datetime.datetime`;
    anything else raises :class:`UnsupportedValueKind` right away."""
    return Cell(kind)


def cell_object() -> CellObject:
    return CellObject()


def maybe_cell(kind: Union[ScalarKind, type, None] = None) -> MaybeCell:
    """A writer of a single optional scalar that always occupies (1, 1), leaving a blank cell for None."""
    return MaybeCell(Cell(kind))


def const(value: Any, kind: Union[ScalarKind, type, None] = None) -> Bound:
    """A writer that always writes `value` in a single cell."""
    writer = Cell(kind)
    return Bound(writer, writer.check(value))


def writer(function: Callable[[Document, CellIndex], CellSize]) -> FunctionWriter:
    """Turn a function of ``(doc, target)`` returning a :class:`CellSize` into a :class:`Writer`."""
    return FunctionWriter(function)


def value_writer(function: Callable[[Document, CellIndex, T], CellSize]) -> FunctionValueWriter[T]:
    """Turn a function of ``(doc, target, value)`` returning a :class:`CellSize` into a :class:`ValueWriter`."""
    return FunctionValueWriter(function)


def select(writer_: ValueWriter[T], selector: Callable[[R], T]) -> Selected[R]:
    return Selected(writer_, selector)


def bind(writer_: ValueWriter[T], value: T) -> Bound:
    return Bound(writer_, value)


def optional(writer_: ValueWriter[T]) -> Collapsible[T]:
    return Collapsible(writer_)


def _chain(axis: Axis, writers: Iterable[AnyWriter]) -> AnyWriter:
    writers = tuple(_ensure_writer(writer_) for writer_ in writers)
    if any(isinstance(writer_, ValueWriter) for writer_ in writers):
        return ValueChain(axis, writers)
    return Chain(axis, writers)


def top_down(first: AnyWriter, second: AnyWriter) -> AnyWriter:
    """Write `first`, then `second` right below it.

    The result occupies the summed height and the widest of both widths. It is a :class:`ValueWriter` if either
    of the two is one."""
    return _chain(VERTICAL, (first, second))


def left_right(first: AnyWriter, second: AnyWriter) -> AnyWriter:
    """Write `first`, then `second` right after it.

    The result occupies the summed width and the tallest of both heights. It is a :class:`ValueWriter` if either
    of the two is one."""
    return _chain(HORIZONTAL, (first, second))


def top_down_all(writers: Iterable[AnyWriter]) -> AnyWriter:
    """Stack `writers` top to bottom, in order."""
    return _chain(VERTICAL, writers)


def left_right_all(writers: Iterable[AnyWriter]) -> AnyWriter:
    """Line `writers` up left to right, in order."""
    return _chain(HORIZONTAL, writers)


def top_down_many(writer_: ValueWriter[T]) -> Many[T]:
    return Many(VERTICAL, writer_)


def left_right_many(writer_: ValueWriter[T]) -> Many[T]:
    return Many(HORIZONTAL, writer_)


def top_down_over(source: Iterable[T], writer_: ValueWriter[T]) -> Bound:
    """Write every element of `source` with `writer_`, one below another."""
    return Bound(top_down_many(writer_), tuple(source))


def left_right_over(source: Iterable[T], writer_: ValueWriter[T]) -> Bound:
    """Write every element of `source` with `writer_`, one after another."""
    return Bound(left_right_many(writer_), tuple(source))


def with_format(writer_: AnyWriter, formatter: Union[Formatter, ValueFormatter]) -> AnyWriter:
    """Run `formatter` over the range `writer_` occupied, after every write. The reported size never changes."""
    _ensure_writer(writer_)
    if not isinstance(formatter, (Formatter, ValueFormatter)):
        raise CompositionError(f'{formatter!r} is neither a Formatter nor a ValueFormatter')

    if isinstance(writer_, ValueWriter):
        return ValueFormatted(writer_, formatter)
    if isinstance(formatter, ValueFormatter):
        raise CompositionError(f'Writer {writer_!r} has no value to pass to {formatter!r}')
    return Formatted(writer_, formatter)
