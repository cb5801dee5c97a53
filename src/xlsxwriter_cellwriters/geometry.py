from typing import ClassVar, Iterator

from attr import attrib, attrs
from xlsxwriter.utility import xl_range_abs

from .errors import IllegalCoordinatesError


def _non_negative(instance, attribute, value):
    if not isinstance(value, int) or isinstance(value, bool):
        raise IllegalCoordinatesError(
            f'{type(instance).__name__}.{attribute.name} must be an integer, got {value!r}'
        )
    if value < 0:
        raise IllegalCoordinatesError(
            f'{type(instance).__name__}.{attribute.name} must not be negative, got {value}'
        )


@attrs(auto_attribs=True, frozen=True)
class CellSize(object):
    """The rectangular extent occupied by a completed write.

    A write that touches no cells has size (0, 0), a single cell write has size (1, 1).

    Examples:
        >>> CellSize(2, 1).add_height_max_width(CellSize(1, 3))
        CellSize(height=3, width=3)
        >>> CellSize(2, 1).add_width_max_height(CellSize(1, 3))
        CellSize(height=2, width=4)
    """
    height: int = attrib(validator=_non_negative)
    width: int = attrib(validator=_non_negative)

    EMPTY: ClassVar['CellSize']
    ONE: ClassVar['CellSize']

    @property
    def is_empty(self) -> bool:
        return self.height == 0 or self.width == 0

    def min(self, other: 'CellSize') -> 'CellSize':
        return CellSize(min(self.height, other.height), min(self.width, other.width))

    def add(self, other: 'CellSize') -> 'CellSize':
        return CellSize(self.height + other.height, self.width + other.width)

    def add_height(self, other: 'CellSize') -> 'CellSize':
        """Sum heights, keep our width and ignore the width of `other`."""
        return CellSize(self.height + other.height, self.width)

    def add_width(self, other: 'CellSize') -> 'CellSize':
        """Sum widths, keep our height and ignore the height of `other`."""
        return CellSize(self.height, self.width + other.width)

    def add_height_max_width(self, other: 'CellSize') -> 'CellSize':
        """Size of `other` stacked below this one."""
        return CellSize(self.height + other.height, max(self.width, other.width))

    def add_width_max_height(self, other: 'CellSize') -> 'CellSize':
        """Size of `other` placed to the right of this one."""
        return CellSize(max(self.height, other.height), self.width + other.width)


CellSize.EMPTY = CellSize(0, 0)
CellSize.ONE = CellSize(1, 1)


@attrs(auto_attribs=True, frozen=True)
class CellIndex(object):
    """Zero-based coordinates of a single cell."""
    row: int = attrib(validator=_non_negative)
    col: int = attrib(validator=_non_negative)

    def down(self, size: CellSize) -> 'CellIndex':
        """The cell right below a block of `size` that starts here."""
        return CellIndex(self.row + size.height, self.col)

    def right(self, size: CellSize) -> 'CellIndex':
        """The cell right after a block of `size` that starts here."""
        return CellIndex(self.row, self.col + size.width)


@attrs(auto_attribs=True, frozen=True)
class CellRange(object):
    """The rectangle actually occupied by a write; this is what formatters receive."""
    top_left: CellIndex
    size: CellSize

    @property
    def is_empty(self) -> bool:
        return self.size.is_empty

    @property
    def bottom_right(self) -> CellIndex:
        """The last cell of the range, inclusive."""
        if self.is_empty:
            raise IllegalCoordinatesError('An empty range has no bottom right cell', target=self)
        return CellIndex(
            self.top_left.row + self.size.height - 1,
            self.top_left.col + self.size.width - 1,
        )

    def contains(self, index: CellIndex) -> bool:
        return (
            self.top_left.row <= index.row < self.top_left.row + self.size.height
            and self.top_left.col <= index.col < self.top_left.col + self.size.width
        )

    def cells(self) -> Iterator[CellIndex]:
        """Every cell of the range, row by row."""
        for row in range(self.top_left.row, self.top_left.row + self.size.height):
            for col in range(self.top_left.col, self.top_left.col + self.size.width):
                yield CellIndex(row, col)

    def to_a1(self) -> str:
        """Absolute A1 notation of the range, like ``$A$1:$C$4``."""
        bottom_right = self.bottom_right
        return xl_range_abs(self.top_left.row, self.top_left.col, bottom_right.row, bottom_right.col)
