from pprint import pformat


class CellWriterError(Exception):
    """Base cell writer error"""

    def __init__(self, message, target=None, value=None, kind=None):
        super().__init__(message)
        self.message = message
        self.target = target
        self.value = value
        self.kind = kind

    def __str__(self):
        segments = []
        if self.target is not None:
            segments.append(f"Target: {self.target}")
        if self.value is not None:
            segments.append(f"Value: {pformat(self.value)}")
        if self.kind is not None:
            segments.append(f"Kind: {getattr(self.kind, '__name__', self.kind)}")
        additional_info = "\n".join(segments)

        full_message = [self.message]
        if additional_info:
            full_message.append(f"Additional info:\n{additional_info}")

        return "\n".join(full_message)


class UnsupportedValueKind(CellWriterError, TypeError):
    """A value (or a type) that cannot be written to a single cell."""


class IllegalCoordinatesError(CellWriterError, ValueError):
    """A coordinate or a size outside of what a worksheet can address."""


class CompositionError(CellWriterError, TypeError):
    """Writers and formatters that cannot be combined."""


class DocumentWriteError(CellWriterError):
    """The backing worksheet refused a write."""
