from io import BytesIO

from pytest import fixture
from xlsxwriter import Workbook

from xlsxwriter_cellwriters.utils import WorkbookPair


class GridDocument(object):
    """A document that only remembers what has been written and in which order."""

    def __init__(self):
        self.cells = {}
        self.log = []

    def set_cell_value(self, row, col, value):
        self.cells[(row, col)] = value
        self.log.append((row, col, value))

    @property
    def touched(self):
        return set(self.cells)


@fixture
def doc():
    return GridDocument()


@fixture
def other_doc():
    return GridDocument()


@fixture
def ws_doc():
    dump = BytesIO()

    wb = Workbook(dump)
    pair = WorkbookPair.from_wb(wb)
    result = pair.add_worksheet("TestSheet")

    yield result

    wb.close()
