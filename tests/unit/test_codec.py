from __future__ import annotations

import socket

import pytest

from wireprobe.domain.codec import (
    RECORD_SIZE,
    DecodeError,
    decode_record,
    encode_record,
    read_record,
    write_record,
)
from wireprobe.domain.models import INT32_MAX, INT32_MIN, Record

LITERAL_IN = bytes.fromhex("01000000 02000000 03000000")
LITERAL_OUT = bytes.fromhex("02000000 03000000 04000000")


class _TricklingSocket:
    """Socket stand-in that hands out at most `step` bytes per recv()."""

    def __init__(self, data: bytes, step: int = 1) -> None:
        self._data = data
        self._step = step
        self.recv_calls = 0

    def recv(self, bufsize: int) -> bytes:
        self.recv_calls += 1
        n = min(self._step, bufsize)
        chunk, self._data = self._data[:n], self._data[n:]
        return chunk


def test_record_size_is_twelve_bytes():
    assert RECORD_SIZE == 12


def test_encode_literal_layout():
    assert encode_record(Record(foo=1, bar=2, baz=3)) == LITERAL_IN


def test_decode_literal_layout():
    assert decode_record(LITERAL_IN).as_tuple() == (1, 2, 3)


def test_literal_scenario_through_increment():
    assert encode_record(decode_record(LITERAL_IN).incremented()) == LITERAL_OUT


def test_fields_are_little_endian_signed():
    data = encode_record(Record(foo=-1, bar=INT32_MIN, baz=INT32_MAX))
    assert data[0:4] == b"\xff\xff\xff\xff"
    assert data[4:8] == b"\x00\x00\x00\x80"
    assert data[8:12] == b"\xff\xff\xff\x7f"


@pytest.mark.parametrize("size", [0, 5, 11, 13])
def test_decode_rejects_wrong_length(size: int):
    data = bytes(range(size))
    with pytest.raises(DecodeError) as exc_info:
        decode_record(data)
    assert exc_info.value.received == data
    assert isinstance(exc_info.value, ValueError)


def test_read_record_assembles_trickled_bytes():
    sock = _TricklingSocket(LITERAL_IN, step=1)
    assert read_record(sock).as_tuple() == (1, 2, 3)
    assert sock.recv_calls == RECORD_SIZE


def test_read_record_leaves_following_bytes_unread():
    sock = _TricklingSocket(LITERAL_IN + LITERAL_OUT, step=64)
    read_record(sock)
    assert sock.recv(64) == LITERAL_OUT


def test_read_record_short_stream_raises_with_partial_bytes(socket_pair):
    server_side, client_side = socket_pair
    client_side.sendall(b"\x01\x00\x00")
    client_side.shutdown(socket.SHUT_WR)

    with pytest.raises(DecodeError, match="after 3 of 12 bytes") as exc_info:
        read_record(server_side)
    assert exc_info.value.received == b"\x01\x00\x00"


def test_write_record_sends_all_bytes(socket_pair):
    server_side, client_side = socket_pair
    write_record(server_side, Record(foo=2, bar=3, baz=4))
    assert client_side.recv(64) == LITERAL_OUT
