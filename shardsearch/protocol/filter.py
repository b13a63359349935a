"""Substring filter applied by every participant to its shard."""

from __future__ import annotations

from typing import Iterable, List, Optional

from shardsearch.domain.models import Record


def format_match(record: Record) -> str:
    return f"{record.primary_field} {record.secondary_field}\n"


def check(record: Record, term: str) -> Optional[str]:
    """Return the output line for `record` if `term` occurs in its primary field."""
    if term in record.primary_field:
        return format_match(record)
    return None


def filter_records(records: Iterable[Record], term: str) -> List[str]:
    matches: List[str] = []
    for record in records:
        line = check(record, term)
        if line is not None:
            matches.append(line)
    return matches


__all__ = ["check", "filter_records", "format_match"]
