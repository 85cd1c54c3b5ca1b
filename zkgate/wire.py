"""Length-prefixed framing for the ticket channel.

Every message is ``u32 big-endian length || payload``. Big integers travel as
a frame holding their minimal big-endian magnitude.
"""

import struct

from zkgate.errors import EncodingError, TransportError
from zkgate.kex import int_to_bytes

HEADER = struct.Struct(">I")
DEFAULT_MAX_FRAME = 64 * 1024


def pack_frame(payload, max_size=DEFAULT_MAX_FRAME):
    if len(payload) > max_size:
        raise EncodingError("frame of {} bytes exceeds limit {}".format(len(payload), max_size))
    return HEADER.pack(len(payload)) + payload


def _recv_exact(sock, n):
    chunks = []
    remaining = n
    while remaining:
        try:
            chunk = sock.recv(remaining)
        except OSError as e:
            raise TransportError("read failed: {}".format(e)) from e
        if not chunk:
            raise TransportError("connection closed after {} of {} bytes".format(n - remaining, n))
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def send_frame(sock, payload, max_size=DEFAULT_MAX_FRAME):
    data = pack_frame(payload, max_size)
    try:
        sock.sendall(data)
    except OSError as e:
        raise TransportError("write failed: {}".format(e)) from e


def recv_frame(sock, max_size=DEFAULT_MAX_FRAME):
    (length,) = HEADER.unpack(_recv_exact(sock, HEADER.size))
    if length > max_size:
        raise EncodingError("peer announced {} byte frame, limit is {}".format(length, max_size))
    return _recv_exact(sock, length)


def encode_int(value):
    return int_to_bytes(value)


def decode_int(payload):
    if not payload:
        raise EncodingError("empty integer encoding")
    return int.from_bytes(payload, "big")


def send_int(sock, value, max_size=DEFAULT_MAX_FRAME):
    send_frame(sock, encode_int(value), max_size)


def recv_int(sock, max_size=DEFAULT_MAX_FRAME):
    return decode_int(recv_frame(sock, max_size))
