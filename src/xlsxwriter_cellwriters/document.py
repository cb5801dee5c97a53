"""The capabilities a backing worksheet has to provide.

Writers only ever call :meth:`Document.set_cell_value`. Formatters bundled in :mod:`formatters` additionally
need a :class:`FormattableDocument`, such as :class:`~xlsxwriter_cellwriters.utils.WorksheetDocument`."""

from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Protocol, Union

from .errors import UnsupportedValueKind

Scalar = Union[str, int, float, date]

_INT32_MIN = -2 ** 31
_INT32_MAX = 2 ** 31 - 1


class ScalarKind(Enum):
    """The closed set of values a single cell can hold."""
    TEXT = 'text'
    INTEGER = 'integer'
    LARGE_INTEGER = 'large_integer'
    FLOAT = 'float'
    DATETIME = 'datetime'

    @classmethod
    def of(cls, value: Any) -> 'ScalarKind':
        """Classify `value`, raising :class:`UnsupportedValueKind` for anything outside the closed set.

        Examples:
            >>> ScalarKind.of("Alpha")
            <ScalarKind.TEXT: 'text'>
            >>> ScalarKind.of(2 ** 40)
            <ScalarKind.LARGE_INTEGER: 'large_integer'>
        """
        value_type = type(value)
        if value_type is bool:
            # bool is an int subclass, but a cell would silently store it as 0 or 1
            raise UnsupportedValueKind('Value of this kind cannot be written to a cell', value=value, kind=value_type)
        if isinstance(value, str):
            return cls.TEXT
        if isinstance(value, int):
            return cls.INTEGER if _INT32_MIN <= value <= _INT32_MAX else cls.LARGE_INTEGER
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, date):
            return cls.DATETIME

        raise UnsupportedValueKind('Value of this kind cannot be written to a cell', value=value, kind=value_type)

    @classmethod
    def for_type(cls, kind: Union['ScalarKind', type]) -> 'ScalarKind':
        """Resolve a python type into a kind when a writer is being composed."""
        if isinstance(kind, ScalarKind):
            return kind
        if isinstance(kind, type) and kind is not bool:
            for base, resolved in _TYPE_KINDS:
                if issubclass(kind, base):
                    return resolved

        raise UnsupportedValueKind('Values of this type cannot be written to a cell', kind=kind)

    def accepts(self, value: Any) -> bool:
        if type(value) is bool:
            return False
        if self is ScalarKind.TEXT:
            return isinstance(value, str)
        if self is ScalarKind.INTEGER or self is ScalarKind.LARGE_INTEGER:
            return isinstance(value, int)
        if self is ScalarKind.FLOAT:
            # ints are accepted where a float is expected, just like a float column in a worksheet
            return isinstance(value, (int, float))
        return isinstance(value, date)

    def check(self, value: Any) -> Any:
        """Return `value` unchanged if this kind accepts it, raise :class:`UnsupportedValueKind` otherwise."""
        if not self.accepts(value):
            raise UnsupportedValueKind(
                f'Cannot write this value as {self.value}',
                value=value,
                kind=type(value)
            )
        return value


_TYPE_KINDS = (
    (str, ScalarKind.TEXT),
    (int, ScalarKind.INTEGER),
    (float, ScalarKind.FLOAT),
    (date, ScalarKind.DATETIME),
)


class Document(Protocol):
    """The only thing writers require from a backing store."""

    def set_cell_value(self, row: int, col: int, value: Scalar) -> None:
        ...


class FormattableDocument(Document, Protocol):
    """A document that also supports the presentation concerns used by the bundled formatters."""

    def impose_format(self, row: int, col: int, format_: Mapping[str, Any]) -> None:
        ...

    def define_name(self, name: str, first_row: int, first_col: int, last_row: int, last_col: int) -> None:
        ...

    def conditional_format(
            self,
            first_row: int,
            first_col: int,
            last_row: int,
            last_col: int,
            options: Mapping[str, Any],
            format_: Optional[Mapping[str, Any]] = None,
    ) -> None:
        ...

    def set_row_height(self, row: int, height: float) -> None:
        ...

    def set_column_width(self, col: int, width: float) -> None:
        ...
