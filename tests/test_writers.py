from datetime import date, datetime

from pytest import raises

from xlsxwriter_cellwriters.document import ScalarKind
from xlsxwriter_cellwriters.errors import CompositionError, UnsupportedValueKind
from xlsxwriter_cellwriters.formatters import EMPTY, formatter, value_formatter
from xlsxwriter_cellwriters.geometry import CellIndex, CellRange, CellSize
from xlsxwriter_cellwriters.writers import (
    Bound, Chain, Collapsible, Many, ValueChain, ValueWriter, Writer, bind, cell, cell_object, const, left_right,
    left_right_all, left_right_many, left_right_over, maybe_cell, optional, select, top_down, top_down_all,
    top_down_many, top_down_over, value_writer, with_format, writer,
)


def block(height, width, label):
    """A writer filling a `height` x `width` rectangle with `label`."""

    @writer
    def write(doc, target):
        for row in range(height):
            for col in range(width):
                doc.set_cell_value(target.row + row, target.col + col, label)
        return CellSize(height, width)

    return write


def rect(top_left, height, width):
    return {*CellRange(top_left, CellSize(height, width)).cells()}


def cells_of(doc):
    return {CellIndex(row, col) for row, col in doc.touched}


class TestScalarKind:
    def test_of(self):
        assert ScalarKind.of("Alpha") is ScalarKind.TEXT
        assert ScalarKind.of(1) is ScalarKind.INTEGER
        assert ScalarKind.of(2 ** 31) is ScalarKind.LARGE_INTEGER
        assert ScalarKind.of(-2 ** 31 - 1) is ScalarKind.LARGE_INTEGER
        assert ScalarKind.of(1.5) is ScalarKind.FLOAT
        assert ScalarKind.of(date(2020, 1, 2)) is ScalarKind.DATETIME
        assert ScalarKind.of(datetime(2020, 1, 2, 3, 4)) is ScalarKind.DATETIME

    def test_of_unsupported(self):
        for value in (None, True, b"bytes", [1], object()):
            with raises(UnsupportedValueKind) as exc:
                ScalarKind.of(value)
            assert exc.value.kind is type(value)

    def test_for_type(self):
        assert ScalarKind.for_type(str) is ScalarKind.TEXT
        assert ScalarKind.for_type(int) is ScalarKind.INTEGER
        assert ScalarKind.for_type(float) is ScalarKind.FLOAT
        assert ScalarKind.for_type(datetime) is ScalarKind.DATETIME
        assert ScalarKind.for_type(ScalarKind.LARGE_INTEGER) is ScalarKind.LARGE_INTEGER

    def test_for_type_unsupported(self):
        for kind in (bool, bytes, list, "str"):
            with raises(UnsupportedValueKind):
                ScalarKind.for_type(kind)

    def test_accepts(self):
        assert ScalarKind.FLOAT.accepts(1)
        assert not ScalarKind.INTEGER.accepts(1.0)
        assert not ScalarKind.INTEGER.accepts(True)
        assert ScalarKind.LARGE_INTEGER.accepts(2 ** 70)
        assert not ScalarKind.TEXT.accepts(1)

    def test_error_message(self):
        with raises(UnsupportedValueKind) as exc:
            ScalarKind.TEXT.check(1)

        assert "Cannot write this value as text" in str(exc.value)
        assert "Kind: int" in str(exc.value)


class TestPrimitives:
    def test_cell(self, doc):
        assert cell()(doc, CellIndex(2, 3), "Alpha") == CellSize.ONE
        assert doc.log == [(2, 3, "Alpha")]

    def test_typed_cell(self, doc):
        writer_ = cell(int)
        assert writer_.kind is ScalarKind.INTEGER
        assert writer_(doc, CellIndex(0, 0), 42) == CellSize.ONE
        assert doc.cells == {(0, 0): 42}

    def test_unsupported_kind_at_composition(self):
        with raises(UnsupportedValueKind):
            cell(bytes)
        with raises(UnsupportedValueKind):
            maybe_cell(bool)

    def test_unsupported_value_is_not_written(self, doc):
        with raises(UnsupportedValueKind) as exc:
            cell(int)(doc, CellIndex(0, 0), "Alpha")
        assert exc.value.kind is str

        with raises(UnsupportedValueKind):
            cell()(doc, CellIndex(0, 0), object())

        assert doc.log == []

    def test_const(self, doc):
        writer_ = const("Alpha")
        assert isinstance(writer_, Writer)
        assert writer_(doc, CellIndex(1, 1)) == CellSize.ONE
        assert writer_(doc, CellIndex(5, 5)) == CellSize.ONE
        assert doc.log == [(1, 1, "Alpha"), (5, 5, "Alpha")]

    def test_const_is_checked_eagerly(self):
        with raises(UnsupportedValueKind):
            const(b"Alpha")
        with raises(UnsupportedValueKind):
            const("Alpha", kind=float)

    def test_maybe_cell(self, doc):
        writer_ = maybe_cell(str)
        assert writer_(doc, CellIndex(0, 0), None) == CellSize.ONE
        assert doc.log == []

        assert writer_(doc, CellIndex(0, 0), "Alpha") == CellSize.ONE
        assert doc.log == [(0, 0, "Alpha")]

    def test_cell_object(self, doc):
        assert cell_object()(doc, CellIndex(0, 0), [1, 2]) == CellSize.ONE
        assert doc.cells == {(0, 0): "[1, 2]"}

    def test_equality(self):
        assert cell(int) == cell(ScalarKind.INTEGER)
        assert const("Alpha") == const("Alpha")
        assert cell(int).bind(1) != cell(int).bind(2)

    def test_custom_writer_must_report_size(self, doc):
        broken = value_writer(lambda doc_, target, value: None)

        with raises(CompositionError, match="instead of a CellSize"):
            broken(doc, CellIndex(0, 0), 1)


class TestValueAdapters:
    def test_select(self, doc):
        writer_ = cell(int).select(len)
        assert isinstance(writer_, ValueWriter)
        assert writer_ == select(cell(int), len)

        assert writer_(doc, CellIndex(0, 0), "Alpha") == CellSize.ONE
        assert doc.cells == {(0, 0): 5}

    def test_bind(self, doc):
        writer_ = bind(cell(), 1.5)
        assert isinstance(writer_, Bound)
        assert writer_(doc, CellIndex(0, 0)) == CellSize.ONE
        assert doc.cells == {(0, 0): 1.5}

    def test_optional_collapses(self, doc):
        writer_ = optional(cell(str))
        assert isinstance(writer_, Collapsible)

        assert writer_(doc, CellIndex(0, 0), None) == CellSize.EMPTY
        assert doc.log == []

        assert writer_(doc, CellIndex(0, 0), "Alpha") == CellSize.ONE
        assert doc.log == [(0, 0, "Alpha")]

    def test_optional_vs_placeholder(self, doc):
        collapsed = cell(str).optional().then_right(cell(str).select(lambda _: "Next"))
        placeholder = maybe_cell(str).then_right(cell(str).select(lambda _: "Next"))

        assert collapsed(doc, CellIndex(0, 0), None) == CellSize(1, 1)
        assert doc.cells == {(0, 0): "Next"}

        assert placeholder(doc, CellIndex(1, 0), None) == CellSize(1, 2)
        assert doc.cells == {(0, 0): "Next", (1, 1): "Next"}


class TestLayout:
    def test_top_down_law(self, doc):
        target = CellIndex(3, 2)

        size = top_down(block(2, 3, "a"), block(1, 4, "b"))(doc, target)

        assert size == CellSize(3, 4)
        assert {cell_ for cell_, value in doc.cells.items() if value == "a"} == {
            (index.row, index.col) for index in rect(target, 2, 3)
        }
        assert {cell_ for cell_, value in doc.cells.items() if value == "b"} == {
            (index.row, index.col) for index in rect(CellIndex(5, 2), 1, 4)
        }

    def test_left_right_law(self, doc):
        target = CellIndex(3, 2)

        size = left_right(block(2, 3, "a"), block(1, 4, "b"))(doc, target)

        assert size == CellSize(2, 7)
        assert {cell_ for cell_, value in doc.cells.items() if value == "b"} == {
            (index.row, index.col) for index in rect(CellIndex(3, 5), 1, 4)
        }

    def test_size_matches_written_cells(self, doc):
        target = CellIndex(1, 1)
        writer_ = left_right(
            top_down(block(1, 2, "a"), block(2, 2, "b")),
            block(3, 1, "c"),
        )

        size = writer_(doc, target)

        assert size == CellSize(3, 3)
        assert cells_of(doc) == rect(target, 3, 3)

    def test_zero_argument_results(self):
        assert isinstance(top_down(const(1), const(2)), Chain)
        assert isinstance(const(1).then_right(const(2)), Chain)

    def test_value_results(self, doc):
        writer_ = const("Header").then_down(cell(int))
        assert isinstance(writer_, ValueChain)

        assert writer_(doc, CellIndex(0, 0), 7) == CellSize(2, 1)
        assert doc.log == [(0, 0, "Header"), (1, 0, 7)]

    def test_value_is_shared(self, doc):
        writer_ = cell(int).then_right(cell(str).select(str))

        assert writer_(doc, CellIndex(0, 0), 7) == CellSize(1, 2)
        assert doc.log == [(0, 0, 7), (0, 1, "7")]

    def test_iterator_is_shared(self, doc):
        writer_ = cell(int).many_down().then_right(cell(int).many_down())

        assert writer_(doc, CellIndex(0, 0), iter([1, 2])) == CellSize(2, 2)
        assert doc.cells == {(0, 0): 1, (1, 0): 2, (0, 1): 1, (1, 1): 2}

    def test_top_down_many(self, doc):
        writer_ = top_down_many(cell(int))
        assert isinstance(writer_, Many)
        assert writer_ == cell(int).many_down()

        assert writer_(doc, CellIndex(1, 1), [1, 2, 3]) == CellSize(3, 1)
        assert doc.log == [(1, 1, 1), (2, 1, 2), (3, 1, 3)]

    def test_left_right_many(self, doc):
        assert left_right_many(cell(int))(doc, CellIndex(1, 1), iter([1, 2, 3])) == CellSize(1, 3)
        assert doc.log == [(1, 1, 1), (1, 2, 2), (1, 3, 3)]

    def test_many_of_nothing(self, doc):
        assert cell(int).many_down()(doc, CellIndex(1, 1), []) == CellSize.EMPTY
        assert cell(int).many_right()(doc, CellIndex(1, 1), []) == CellSize.EMPTY
        assert doc.log == []

    def test_many_with_collapsed_items(self, doc):
        writer_ = cell(int).optional().many_down()

        assert writer_(doc, CellIndex(0, 0), [1, None, 2]) == CellSize(2, 1)
        assert doc.log == [(0, 0, 1), (1, 0, 2)]

    def test_many_uneven_rows(self, doc):
        row = value_writer(lambda doc_, target, n: left_right_over(range(n), cell(int))(doc_, target))

        assert row.many_down()(doc, CellIndex(0, 0), [1, 3, 2]) == CellSize(3, 3)
        assert doc.log == [(0, 0, 0), (1, 0, 0), (1, 1, 1), (1, 2, 2), (2, 0, 0), (2, 1, 1)]

    def test_over(self, doc):
        source = (value for value in "abc")
        writer_ = top_down_over(source, cell(str))
        assert isinstance(writer_, Writer)

        assert writer_(doc, CellIndex(0, 0)) == CellSize(3, 1)
        # Source is captured, the writer may be reused
        assert writer_(doc, CellIndex(0, 1)) == CellSize(3, 1)
        assert doc.cells == {
            (0, 0): "a", (1, 0): "b", (2, 0): "c",
            (0, 1): "a", (1, 1): "b", (2, 1): "c",
        }

    def test_all(self, doc):
        writer_ = top_down_all([const(1), block(2, 2, "b"), const(3)])
        assert isinstance(writer_, Chain)

        assert writer_(doc, CellIndex(0, 0)) == CellSize(4, 2)
        assert doc.log[0] == (0, 0, 1)
        assert doc.log[-1] == (3, 0, 3)

    def test_all_with_values(self, doc):
        writer_ = left_right_all([const("="), cell(int), cell(int).select(lambda n: n * 2)])
        assert isinstance(writer_, ValueChain)

        assert writer_(doc, CellIndex(0, 0), 4) == CellSize(1, 3)
        assert doc.log == [(0, 0, "="), (0, 1, 4), (0, 2, 8)]

    def test_all_of_nothing(self, doc):
        assert top_down_all([])(doc, CellIndex(4, 4)) == CellSize.EMPTY
        assert left_right_all([])(doc, CellIndex(4, 4)) == CellSize.EMPTY

    def test_not_a_writer(self):
        with raises(CompositionError, match="neither a Writer nor a ValueWriter"):
            top_down(const(1), lambda doc, target: CellSize.ONE)

    def test_fail_fast(self, doc):
        calls = []
        writer_ = left_right_all([
            const(1),
            cell(int).bind("two"),
            const(3),
        ]).with_format(formatter(lambda doc_, rng: calls.append(rng)))

        with raises(UnsupportedValueKind):
            writer_(doc, CellIndex(0, 0))

        assert doc.log == [(0, 0, 1)]
        assert calls == []

    def test_fail_fast_many(self, doc):
        with raises(UnsupportedValueKind):
            cell(int).many_down()(doc, CellIndex(0, 0), [1, "two", 3])

        assert doc.log == [(0, 0, 1)]

    def test_reuse_across_documents(self, doc, other_doc):
        writer_ = const("Header").then_down(cell(int).many_down())
        other = other_doc

        assert writer_(doc, CellIndex(0, 0), [1, 2]) == writer_(other, CellIndex(0, 0), [1, 2])
        assert doc.log == other.log


class TestFormat:
    def test_range_and_size(self, doc):
        ranges = []
        writer_ = block(2, 3, "a")

        formatted = writer_.with_format(formatter(lambda doc_, rng: ranges.append(rng)))

        assert formatted(doc, CellIndex(4, 5)) == writer_(doc, CellIndex(4, 5)) == CellSize(2, 3)
        assert ranges == [CellRange(CellIndex(4, 5), CellSize(2, 3))]

    def test_formatter_runs_after_write(self, doc):
        seen = []
        formatted = cell(int).with_format(formatter(lambda doc_, rng: seen.append(dict(doc_.cells))))

        formatted(doc, CellIndex(0, 0), 1)

        assert seen == [{(0, 0): 1}]

    def test_value_formatter(self, doc):
        seen = []
        formatted = cell(int).many_right().with_format(
            value_formatter(lambda doc_, rng, value: seen.append((rng, value)))
        )

        assert formatted(doc, CellIndex(0, 0), (1, 2)) == CellSize(1, 2)
        assert seen == [(CellRange(CellIndex(0, 0), CellSize(1, 2)), (1, 2))]

    def test_value_formatter_sees_iterator_items(self, doc):
        seen = []
        formatted = cell(int).many_down().with_format(
            value_formatter(lambda doc_, rng, value: seen.append(list(value)))
        )

        assert formatted(doc, CellIndex(0, 0), (n for n in [1, 2])) == CellSize(2, 1)
        assert doc.log == [(0, 0, 1), (1, 0, 2)]
        assert seen == [[1, 2]]

    def test_collapsed_range(self, doc):
        ranges = []
        formatted = cell(int).optional().with_format(formatter(lambda doc_, rng: ranges.append(rng)))

        assert formatted(doc, CellIndex(2, 2), None) == CellSize.EMPTY
        assert ranges == [CellRange(CellIndex(2, 2), CellSize.EMPTY)]

    def test_empty_formatter(self, doc):
        assert with_format(const(1), EMPTY)(doc, CellIndex(0, 0)) == CellSize.ONE
        assert doc.log == [(0, 0, 1)]

    def test_value_formatter_needs_value(self):
        with raises(CompositionError, match="has no value"):
            const(1).with_format(value_formatter(lambda doc, rng, value: None))

    def test_not_a_formatter(self):
        with raises(CompositionError, match="neither a Formatter nor a ValueFormatter"):
            const(1).with_format(lambda doc, rng: None)
