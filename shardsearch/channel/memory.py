"""
In-memory message channel.

All participants live in one process (typically one thread each); every
ordered (sender, receiver) pair gets its own FIFO queue, which preserves
per-pair send order without ordering messages across senders.
"""

from __future__ import annotations

import queue
from typing import Dict, Optional, Tuple

from shardsearch.channel.base import DEFAULT_MAX_FRAME_BYTES, AbstractChannel
from shardsearch.errors import ChannelFault


class InMemoryNetwork:
    """Queues connecting `size` in-process participants."""

    def __init__(
        self,
        size: int,
        max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES,
        receive_timeout: Optional[float] = None,
    ) -> None:
        self.size = size
        self.max_frame_bytes = max_frame_bytes
        self.receive_timeout = receive_timeout
        self._queues: Dict[Tuple[int, int], queue.Queue[bytes]] = {
            (src, dst): queue.Queue()
            for src in range(size)
            for dst in range(size)
            if src != dst
        }

    def link(self, source: int, dest: int) -> queue.Queue[bytes]:
        return self._queues[(source, dest)]

    def channel(self, rank: int) -> InMemoryChannel:
        return InMemoryChannel(self, rank)

    def inject(self, source: int, dest: int, data: bytes) -> None:
        """Place raw bytes on a link, bypassing framing."""
        self.link(source, dest).put(data)

    def pending(self, source: int, dest: int) -> int:
        return self.link(source, dest).qsize()


class InMemoryChannel(AbstractChannel):
    def __init__(self, network: InMemoryNetwork, rank: int) -> None:
        super().__init__(
            rank=rank,
            size=network.size,
            max_frame_bytes=network.max_frame_bytes,
            receive_timeout=network.receive_timeout,
        )
        self._network = network

    def _send_frame(self, dest: int, frame: bytes) -> None:
        self._network.link(self.rank, dest).put(frame)

    def _recv_frame(self, source: int) -> bytes:
        try:
            return self._network.link(source, self.rank).get(timeout=self.receive_timeout)
        except queue.Empty as exc:
            raise ChannelFault(
                f"participant {self.rank} timed out after {self.receive_timeout}s "
                f"waiting for participant {source}"
            ) from exc


__all__ = ["InMemoryChannel", "InMemoryNetwork"]
