"""
IPS patch records and the patch file parser.

Details of the IPS format:
- https://zerosoft.zophar.net/ips.php
- http://justsolve.archiveteam.org/wiki/IPS_(binary_patch_format)
"""
import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Union

from .errors import InvalidPathError, MalformedHeaderError, TruncatedRecordError

HEADER = b"PATCH"
EOF_MARKER = b"EOF"

MAX_OFFSET = 0xFFFFFF
MAX_SIZE = 0xFFFF


@dataclass(frozen=True)
class LiteralRecord:
    """Write `data` verbatim starting at `offset`."""

    offset: int
    data: bytes

    def __post_init__(self):
        if not 0 <= self.offset <= MAX_OFFSET:
            raise ValueError(f"Record offset 0x{self.offset:X} does not fit in 24 bits")
        if len(self.data) > MAX_SIZE:
            raise ValueError(f"Record data is {len(self.data)} bytes, IPS allows at most {MAX_SIZE}")

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        return self.offset + len(self.data)


@dataclass(frozen=True)
class RunLengthRecord:
    """Write `length` copies of the byte `value` starting at `offset`."""

    offset: int
    length: int
    value: int

    def __post_init__(self):
        if not 0 <= self.offset <= MAX_OFFSET:
            raise ValueError(f"Record offset 0x{self.offset:X} does not fit in 24 bits")
        if not 0 <= self.length <= MAX_SIZE:
            raise ValueError(f"RLE length {self.length} does not fit in 16 bits")
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"RLE value {self.value} is not a byte")

    @property
    def size(self) -> int:
        return self.length

    @property
    def end(self) -> int:
        return self.offset + self.length

    def expand(self) -> bytes:
        return bytes([self.value]) * self.length


Record = Union[LiteralRecord, RunLengthRecord]


@dataclass(frozen=True)
class Patch:
    records: tuple[Record, ...] = ()

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def _need(data: bytes, pos: int, count: int, field: str):
    available = max(len(data) - pos, 0)
    if available < count:
        raise TruncatedRecordError(field, count, available, pos)


def parse(data: bytes) -> Patch:
    """Decode a raw IPS buffer into its records, in file order.

    Parsing stops at the first `EOF` marker; anything after it is ignored.
    Raises `MalformedHeaderError` or `TruncatedRecordError` on bad input.
    The buffer is only read in place, so a caller's `bytearray` can be
    resized again as soon as this returns or raises.
    """
    if bytes(data[:len(HEADER)]) != HEADER:
        raise MalformedHeaderError(bytes(data[:len(HEADER)]))

    records: list[Record] = []
    pos = len(HEADER)
    while True:
        head = bytes(data[pos:pos + 3])
        if head == EOF_MARKER:
            break
        if len(head) < 3:
            # Nothing, "E" or "EO" left means the terminator itself was cut off.
            field = "eof_marker" if EOF_MARKER.startswith(head) else "offset"
            raise TruncatedRecordError(field, 3, len(head), pos)
        offset = struct.unpack(">I", b"\x00" + head)[0]
        pos += 3

        _need(data, pos, 2, "size")
        size = struct.unpack_from(">H", data, pos)[0]
        pos += 2

        if size == 0:
            _need(data, pos, 2, "rle_length")
            length = struct.unpack_from(">H", data, pos)[0]
            pos += 2
            _need(data, pos, 1, "rle_value")
            value = data[pos]
            pos += 1
            records.append(RunLengthRecord(offset, length, value))
        else:
            _need(data, pos, size, "data")
            # Copy the payload so records outlive the patch buffer.
            chunk = bytes(data[pos:pos + size])
            pos += size
            records.append(LiteralRecord(offset, chunk))

    return Patch(tuple(records))


def load_patch(path: str | Path) -> Patch:
    try:
        filepath = os.fspath(path)
        with open(filepath, "rb") as f:
            data = f.read()
    except (TypeError, ValueError) as e:
        # Wrong type or embedded NUL: not something the OS can open.
        raise InvalidPathError(path) from e
    return parse(data)


def describe_records(patch: Patch) -> list[dict[str, Any]]:
    """One plain mapping per record, suitable for printing or YAML output."""
    rows = []
    for index, rec in enumerate(patch):
        row: dict[str, Any] = {"index": index}
        if isinstance(rec, RunLengthRecord):
            row.update(type="rle", offset=rec.offset, size=rec.length, value=rec.value)
        else:
            row.update(type="data", offset=rec.offset, size=rec.size)
        rows.append(row)
    return rows
