"""Errors raised while loading, parsing and applying IPS patches."""


class IpsError(ValueError):
    """Base class for every patch-related failure."""


class InvalidPathError(IpsError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Bad path: {path!r}")


class MalformedHeaderError(IpsError):
    def __init__(self, found: bytes):
        self.found = found
        super().__init__(f"Missing PATCH header (found {found!r})")


class TruncatedRecordError(IpsError):
    """End of the patch buffer reached while `field` was still expected."""

    def __init__(self, field: str, expected: int, available: int, position: int):
        self.field = field
        self.expected = expected
        self.available = available
        self.position = position
        if field == "eof_marker":
            msg = f"Expecting 'EOF' marker, got {available} of {expected} bytes before reaching end of file"
        else:
            msg = f"Expecting record '{field}' field, got {available} of {expected} bytes before reaching end of file"
        super().__init__(f"{msg} (patch offset 0x{position:06X})")


class OutOfBoundsError(IpsError):
    def __init__(self, record, index: int, input_size: int):
        self.record = record
        self.index = index
        self.input_size = input_size
        kind = "RLE" if hasattr(record, "value") else "Normal"
        super().__init__(
            f"{kind} record #{index} with offset 0x{record.offset:06X}, size {record.size} is out of bounds "
            f"(input is {input_size} bytes)"
        )
