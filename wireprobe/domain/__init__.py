"""
Domain package for wireprobe.

Exports the Record model and its binary codec. Keep this package focused on
data definitions and the wire format; no sockets are opened here.
"""

from wireprobe.domain.codec import (
    RECORD_SIZE,
    DecodeError,
    decode_record,
    encode_record,
    read_record,
    write_record,
)
from wireprobe.domain.models import INT32_MAX, INT32_MIN, Record

__all__ = [
    "DecodeError",
    "INT32_MAX",
    "INT32_MIN",
    "RECORD_SIZE",
    "Record",
    "decode_record",
    "encode_record",
    "read_record",
    "write_record",
]
