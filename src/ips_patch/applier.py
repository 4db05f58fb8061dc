"""Replays parsed IPS records over an input buffer."""
from .errors import OutOfBoundsError
from .ips import LiteralRecord, Patch


def apply_patch(patch: Patch, data: bytes) -> bytes:
    """Return a patched copy of `data`.

    Records are replayed strictly in file order, so a later record wins where
    two records overlap. A record whose offset equals the current output length
    extends the buffer; every other record must fit inside the original input.
    """
    out = bytearray(data)
    for index, rec in enumerate(patch):
        chunk = rec.data if isinstance(rec, LiteralRecord) else rec.expand()

        # Special case: extend existing ROM data.
        if rec.offset == len(out):
            out.extend(chunk)
            continue

        # Checked against the original input, not the grown output.
        if rec.end > len(data):
            raise OutOfBoundsError(rec, index, len(data))
        out[rec.offset:rec.end] = chunk
    return bytes(out)
