"""Wire format shared by the client and the server.

Every frame is a 32-bit little-endian operation code, a 32-bit
little-endian payload size and the payload itself. A package payload is
a run of items, each a 32-bit length followed by that many bytes.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")


class OpCode(IntEnum):
    """Operation carried by a frame."""

    MESSAGE = 0
    PACKAGE = 1


def _frame(op_code: OpCode, payload: bytes) -> bytes:
    return _INT.pack(int(op_code)) + _INT.pack(len(payload)) + payload


def _as_bytes(value: str | bytes) -> bytes:
    """Strings travel NUL-terminated; bytes travel as given."""
    if isinstance(value, str):
        return value.encode("utf-8") + b"\0"
    return bytes(value)


@dataclass
class Package:
    """A package frame being assembled item by item."""

    buffer: bytearray = field(default_factory=bytearray)
    op_code: OpCode = OpCode.PACKAGE

    def add(self, value: str | bytes) -> None:
        """Append one length-prefixed item to the payload."""
        data = _as_bytes(value)
        self.buffer += _INT.pack(len(data))
        self.buffer += data

    def serialize(self) -> bytes:
        """Return the complete frame ready to be sent."""
        return _frame(self.op_code, bytes(self.buffer))


def encode_message(message: str | bytes) -> bytes:
    """Return a message frame holding the given text."""
    return _frame(OpCode.MESSAGE, _as_bytes(message))


def decode_items(payload: bytes) -> list[bytes]:
    """Split a package payload into its raw items.

    Raises ValueError when the payload is truncated or malformed.
    """
    items: list[bytes] = []
    view = memoryview(payload)
    offset = 0
    while offset < len(view):
        if offset + _INT.size > len(view):
            raise ValueError("truncated item length")
        (length,) = _INT.unpack_from(view, offset)
        offset += _INT.size
        if length < 0:
            raise ValueError(f"negative item length: {length}")
        if offset + length > len(view):
            raise ValueError("truncated item data")
        items.append(bytes(view[offset:offset + length]))
        offset += length
    return items