"""
Binary codec for the Record wire format.

Layout (12 bytes, no padding, no length prefix):

    offset 0  Foo  little-endian signed 32-bit
    offset 4  Bar  little-endian signed 32-bit
    offset 8  Baz  little-endian signed 32-bit

The layout is spelled out with an explicit struct format rather than derived
from the model, so field order and width never depend on the model class.
"""
from __future__ import annotations

import socket
import struct

from wireprobe.domain.models import Record

RECORD_FORMAT = struct.Struct("<iii")
RECORD_SIZE = RECORD_FORMAT.size  # 12


class DecodeError(ValueError):
    """Raised when a complete Record cannot be decoded."""

    def __init__(self, message: str, received: bytes = b"") -> None:
        super().__init__(message)
        self.received = received


def encode_record(record: Record) -> bytes:
    """Serialize a Record to its 12-byte wire form."""
    return RECORD_FORMAT.pack(record.foo, record.bar, record.baz)


def decode_record(data: bytes) -> Record:
    """
    Decode exactly one Record from `data`.

    Raises
    ------
    DecodeError
        If `data` is not exactly RECORD_SIZE bytes long.
    """
    if len(data) != RECORD_SIZE:
        raise DecodeError(
            f"expected {RECORD_SIZE} bytes, got {len(data)}", received=bytes(data)
        )
    foo, bar, baz = RECORD_FORMAT.unpack(data)
    return Record(foo=foo, bar=bar, baz=baz)


def read_record(sock: socket.socket) -> Record:
    """
    Receive exactly RECORD_SIZE bytes from `sock` and decode them.

    Bytes are never buffered across calls: if the peer ends the stream early,
    a DecodeError carrying the partial bytes is raised. Socket errors
    (including timeouts) propagate unchanged.
    """
    buf = bytearray()
    while len(buf) < RECORD_SIZE:
        chunk = sock.recv(RECORD_SIZE - len(buf))
        if not chunk:
            raise DecodeError(
                f"unexpected end of stream after {len(buf)} of {RECORD_SIZE} bytes",
                received=bytes(buf),
            )
        buf.extend(chunk)
    return decode_record(bytes(buf))


def write_record(sock: socket.socket, record: Record) -> None:
    """Send the full 12-byte encoding of `record`."""
    sock.sendall(encode_record(record))


__all__ = [
    "DecodeError",
    "RECORD_FORMAT",
    "RECORD_SIZE",
    "decode_record",
    "encode_record",
    "read_record",
    "write_record",
]
