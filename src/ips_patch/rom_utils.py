import zlib
from pathlib import Path
from typing import BinaryIO


def read_rom_bytes(path: str | Path) -> bytes:
    return Path(path).read_bytes()


def write_rom_bytes(path: str | Path, data: bytes) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_bytes(data)


def read_stream_bytes(stream: BinaryIO) -> bytes:
    return stream.read()


def write_stream_bytes(stream: BinaryIO, data: bytes) -> None:
    # Verbatim: no framing, no trailing newline.
    stream.write(data)
    stream.flush()


def crc32(data: bytes) -> int:
    return zlib.crc32(data) & 0xFFFFFFFF
