"""Reading and writing whole byte counts on streams."""

from __future__ import annotations

import errno
from typing import BinaryIO


def read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read up to ``n`` bytes, stopping early only at end of stream."""
    chunks = []
    remaining = n
    while remaining > 0:
        chunk = stream.read(remaining)
        if chunk is None:
            raise BlockingIOError(errno.EAGAIN, "stream would block")
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def write_all(stream: BinaryIO, data: bytes) -> int:
    """Write all of ``data``; raise OSError if the stream stops accepting it."""
    view = memoryview(data)
    while view:
        written = stream.write(view)
        if not written:
            raise OSError(errno.EIO, "stream accepted no data")
        view = view[written:]
    return len(data)