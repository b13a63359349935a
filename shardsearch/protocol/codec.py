"""
Record codec: flat text representation of record sets and match results.

Records travel as ``primary,secondary`` lines, newline-terminated, in shard
order. Decoding splits each line at the first comma, so the secondary field
may contain commas but the primary field may not. Match results travel as the
concatenation of their already formatted lines.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from shardsearch.config import MalformedPolicy
from shardsearch.domain.models import Record
from shardsearch.errors import InvalidConfiguration, MalformedRecordLine
from shardsearch.utils.logging import get_logger

log = get_logger(__name__)

ENCODING = "utf-8"
FIELD_DELIMITER = ","
LINE_TERMINATOR = "\n"
POLICIES = ("skip", "strict")


def ensure_policy(policy: str) -> MalformedPolicy:
    if policy not in POLICIES:
        raise InvalidConfiguration(
            f"unknown malformed-line policy {policy!r}; expected one of {', '.join(POLICIES)}"
        )
    return policy  # type: ignore[return-value]


def unencodable_reason(record: Record) -> str | None:
    """Explain why `record` cannot survive a wire round trip, or None if it can."""
    if FIELD_DELIMITER in record.primary_field:
        return "primary field contains the field delimiter"
    if LINE_TERMINATOR in record.primary_field or LINE_TERMINATOR in record.secondary_field:
        return "field contains a line break"
    return None


def encode_records(records: Iterable[Record]) -> bytes:
    lines: List[str] = []
    for record in records:
        reason = unencodable_reason(record)
        if reason is not None:
            raise MalformedRecordLine(f"{record.primary_field},{record.secondary_field}", reason)
        lines.append(f"{record.primary_field}{FIELD_DELIMITER}{record.secondary_field}{LINE_TERMINATOR}")
    return "".join(lines).encode(ENCODING)


def decode_records(payload: bytes, policy: MalformedPolicy = "skip") -> List[Record]:
    """
    Decode a record payload produced by `encode_records`.

    Blank lines are ignored. A line without any comma is dropped under the
    ``skip`` policy and raises MalformedRecordLine under ``strict``.
    """
    records: List[Record] = []
    dropped = 0
    for line in payload.decode(ENCODING).split(LINE_TERMINATOR):
        if not line:
            continue
        primary, sep, secondary = line.partition(FIELD_DELIMITER)
        if not sep:
            if policy == "strict":
                raise MalformedRecordLine(line, "missing field delimiter")
            dropped += 1
            continue
        records.append(Record(primary_field=primary, secondary_field=secondary))
    if dropped:
        log.warning("Dropped malformed wire lines", extra={"dropped": dropped})
    return records


def encode_matches(lines: Sequence[str]) -> bytes:
    return "".join(lines).encode(ENCODING)


def decode_matches(payload: bytes) -> List[str]:
    if not payload:
        return []
    parts = payload.decode(ENCODING).split(LINE_TERMINATOR)
    lines = [part + LINE_TERMINATOR for part in parts[:-1]]
    # Tolerate a sender that omitted the final newline.
    if parts[-1]:
        lines.append(parts[-1])
    return lines


__all__ = [
    "decode_matches",
    "decode_records",
    "encode_matches",
    "encode_records",
    "ensure_policy",
    "unencodable_reason",
]
