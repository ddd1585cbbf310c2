import io

import pytest

from peersync.streams import read_exact, write_all


class _Trickle(io.RawIOBase):
    """A raw stream that moves at most one byte per call."""

    def __init__(self, data=b""):
        self.data = bytearray(data)
        self.written = bytearray()

    def readable(self):
        return True

    def writable(self):
        return True

    def read(self, size=-1):
        chunk = bytes(self.data[:1])
        del self.data[:1]
        return chunk

    def write(self, b):
        self.written += bytes(b)[:1]
        return 1 if len(b) else 0


class _Stuck(io.RawIOBase):
    def writable(self):
        return True

    def write(self, b):
        return 0


def test_read_exact_reads_requested_count():
    stream = io.BytesIO(b"abcdef")
    assert read_exact(stream, 4) == b"abcd"
    assert stream.read() == b"ef"


def test_read_exact_collects_short_reads():
    assert read_exact(_Trickle(b"hello world"), 5) == b"hello"


def test_read_exact_stops_at_end_of_stream():
    assert read_exact(io.BytesIO(b"abc"), 10) == b"abc"


def test_read_exact_zero_bytes():
    assert read_exact(io.BytesIO(b"abc"), 0) == b""


def test_write_all_handles_partial_writes():
    stream = _Trickle()
    assert write_all(stream, b"payload") == 7
    assert bytes(stream.written) == b"payload"


def test_write_all_round_trip():
    stream = io.BytesIO()
    write_all(stream, b"\x00\x01\x02")
    stream.seek(0)
    assert read_exact(stream, 3) == b"\x00\x01\x02"


def test_write_all_raises_when_nothing_written():
    with pytest.raises(OSError):
        write_all(_Stuck(), b"data")