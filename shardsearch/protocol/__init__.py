"""
Wire protocol for shardsearch: partitioning, framing, record codec and the
filter predicate. Everything here is pure and free of process concerns.
"""

from shardsearch.protocol.codec import (
    decode_matches,
    decode_records,
    encode_matches,
    encode_records,
)
from shardsearch.protocol.filter import check, filter_records
from shardsearch.protocol.framing import Frame, decode_frame, encode_frame
from shardsearch.protocol.partitioner import chunk_size, partition

__all__ = [
    "Frame",
    "check",
    "chunk_size",
    "decode_frame",
    "decode_matches",
    "decode_records",
    "encode_frame",
    "encode_matches",
    "encode_records",
    "filter_records",
    "partition",
]
