"""
Length-prefixed wire framing.

A frame is a 4-byte big-endian length followed by the payload and a single
NUL terminator; the length counts the terminator, so an empty payload is a
valid frame of length 1. Decoding never trusts the sender: lengths above the
configured maximum, truncated bodies and missing terminators are rejected.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from shardsearch.errors import FrameError

HEADER = struct.Struct("!I")
TERMINATOR = b"\x00"
MAX_LENGTH = 0xFFFFFFFF


@dataclass(frozen=True)
class Frame:
    length: int
    payload: bytes

    @classmethod
    def wrap(cls, payload: bytes) -> Frame:
        length = len(payload) + len(TERMINATOR)
        if length > MAX_LENGTH:
            raise FrameError(f"payload of {len(payload)} bytes does not fit a uint32 frame")
        return cls(length=length, payload=payload)

    def to_bytes(self) -> bytes:
        return HEADER.pack(self.length) + self.payload + TERMINATOR


def encode_frame(payload: bytes) -> bytes:
    return Frame.wrap(payload).to_bytes()


def decode_frame(data: bytes, max_frame_bytes: int) -> Frame:
    """
    Parse one complete frame, enforcing `max_frame_bytes` on the declared length.
    """
    if len(data) < HEADER.size:
        raise FrameError(f"frame header truncated: got {len(data)} bytes")
    (length,) = HEADER.unpack_from(data)
    if length < len(TERMINATOR):
        raise FrameError("frame length 0 is missing the terminator")
    if length > max_frame_bytes:
        raise FrameError(f"frame length {length} exceeds maximum of {max_frame_bytes} bytes")
    body = data[HEADER.size :]
    if len(body) != length:
        raise FrameError(f"frame declares {length} bytes but carries {len(body)}")
    if not body.endswith(TERMINATOR):
        raise FrameError("frame is not NUL-terminated")
    return Frame(length=length, payload=body[: -len(TERMINATOR)])


__all__ = ["Frame", "HEADER", "decode_frame", "encode_frame"]
