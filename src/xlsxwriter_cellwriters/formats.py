from collections import defaultdict
from typing import Any, Dict, Mapping

from attr import Factory, attrs
from xlsxwriter import Workbook as XlsxWriterWorkbook
from xlsxwriter.format import Format


class FormatDict(Dict[str, Any]):
    """A dictionary of XlsxWriter format properties that can be merged with ``|`` and used as a key.

    Examples:
        >>> F1 = FormatDict({'bold': True})
        >>> F2 = FormatDict({'align': 'center'})
        >>> F1 | F2 == FormatDict({'bold': True, 'align': 'center'})
        True
        >>> hash(F1 | F2) == hash(F2 | F1)
        True
    """

    def __or__(self, other: Mapping[str, Any]) -> 'FormatDict':
        return FormatDict({
            **self,
            **other
        })

    def __ror__(self, other: Mapping[str, Any]) -> 'FormatDict':
        return FormatDict({
            **other,
            **self
        })

    def __hash__(self):
        return hash((*sorted(self.items()),))


@attrs(auto_attribs=True)
class FormatHandler(object):
    """Adds a format to the workbook the first time it is used. Only one should be used per Workbook."""
    target: XlsxWriterWorkbook
    _memoized: Dict[int, Format] = Factory(dict)

    def verify_format(self, format_: Mapping[str, Any]) -> Format:
        format_ = FormatDict(format_)
        hashed = hash(format_)
        if hashed not in self._memoized:
            self._memoized[hashed] = self.target.add_format(format_)
        return self._memoized[hashed]


def ensure_format_uniqueness(class_):
    """A class decorator used to verify that all formats in the decorated class are unique and use FormatDict."""
    hashes = defaultdict(list)
    for attr in dir(class_):
        if not attr.startswith('_'):
            attr_value = getattr(class_, attr)
            if not isinstance(attr_value, FormatDict):
                raise TypeError(f'Format {attr_value} must be a FormatDict')
            hashes[hash(attr_value)].append(attr)

    for formats in hashes.values():
        if len(formats) > 1:
            raise ValueError(f'{formats} are the same')

    return class_


@ensure_format_uniqueness
class FormatsNamespace(object):
    base = FormatDict({})
    default_font_name = base | {'font_name': 'Liberation Sans'}
    default_font_size = base | {'font_size': 10}

    datetime = base | {'num_format': 'yyyy-mm-dd hh:mm:ss'}

    center = base | {'align': 'center', 'valign': 'vcenter'}
    wrapped = base | {'text_wrap': True}
    bold = base | {'bold': True}
    italic = base | {'italic': True}

    default_font = default_font_name | default_font_size
    default_header = default_font | bold | center | wrapped

    left_border = base | {'left': 1}
    top_border = base | {'top': 1}
    right_border = base | {'right': 1}
    bottom_border = base | {'bottom': 1}
    highlight_border = left_border | top_border | right_border | bottom_border
