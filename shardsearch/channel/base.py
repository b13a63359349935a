"""
Message channel interfaces for shardsearch.

A channel gives one participant reliable, ordered, point-to-point delivery to
any other participant of the group, addressed by rank. Implementations move
complete wire frames; framing and bounds checks live here so every transport
enforces them the same way.
"""

from __future__ import annotations

import abc
from typing import Optional, Protocol, runtime_checkable

from shardsearch.errors import ChannelFault
from shardsearch.protocol.framing import decode_frame, encode_frame
from shardsearch.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_MAX_FRAME_BYTES = 64 * 1024 * 1024


@runtime_checkable
class MessageChannel(Protocol):
    """
    Common interface of every transport.

    Attributes
    ----------
    rank : int
        Identity of the participant owning this endpoint.
    size : int
        Number of participants in the group, coordinator included.
    """

    rank: int
    size: int

    def send(self, dest: int, payload: bytes) -> None:
        """Block until `payload` is accepted for delivery to `dest`."""
        ...

    def recv(self, source: int) -> bytes:
        """Block until the next payload from `source` arrives and return it."""
        ...

    def close(self) -> None:
        ...


class AbstractChannel(abc.ABC):
    """
    Framing-aware base for transports.

    Subclasses only move opaque frames via `_send_frame` / `_recv_frame`.
    """

    def __init__(
        self,
        rank: int,
        size: int,
        max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES,
        receive_timeout: Optional[float] = None,
    ) -> None:
        self.rank = rank
        self.size = size
        self.max_frame_bytes = max_frame_bytes
        self.receive_timeout = receive_timeout

    def _check_peer(self, peer: int) -> None:
        if not 0 <= peer < self.size or peer == self.rank:
            raise ChannelFault(
                f"participant {self.rank} cannot address participant {peer} "
                f"in a group of {self.size}"
            )

    def send(self, dest: int, payload: bytes) -> None:
        self._check_peer(dest)
        frame = encode_frame(payload)
        self._send_frame(dest, frame)
        log.debug("Frame sent", extra={"dest": dest, "frame_bytes": len(frame)})

    def recv(self, source: int) -> bytes:
        self._check_peer(source)
        data = self._recv_frame(source)
        frame = decode_frame(data, self.max_frame_bytes)
        log.debug("Frame received", extra={"source": source, "frame_bytes": len(data)})
        return frame.payload

    def close(self) -> None:
        """Release transport resources. Default: nothing to release."""

    def __enter__(self) -> AbstractChannel:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @abc.abstractmethod
    def _send_frame(self, dest: int, frame: bytes) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _recv_frame(self, source: int) -> bytes:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = ["AbstractChannel", "DEFAULT_MAX_FRAME_BYTES", "MessageChannel"]
