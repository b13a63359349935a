"""
Record source loading for the coordinator.

A source is a UTF-8 text file holding one record per line. Each physical line
is parsed on its own with the standard `csv` module: the first field is the
primary field, the remaining fields joined by commas form the secondary field.
Both the legacy quoted shape (``"Alice","111"``) and plain ``Alice,111`` lines
load to the same record. A bad line (stray quote, undecodable bytes, oversized
field) only ever affects itself. Records that could not survive the wire codec
are treated as malformed at load time, so the coordinator and the workers
always see the same records.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import BinaryIO, Iterator, List, Sequence

from shardsearch.config import MalformedPolicy
from shardsearch.domain.models import Record
from shardsearch.errors import InvalidConfiguration, MalformedRecordLine
from shardsearch.protocol.codec import ENCODING, FIELD_DELIMITER, unencodable_reason
from shardsearch.utils.logging import get_logger

log = get_logger(__name__)


def _parse_line(raw: bytes) -> tuple[str, Record | None, str]:
    try:
        line = raw.decode(ENCODING)
    except UnicodeDecodeError as exc:
        return raw.decode(ENCODING, errors="replace"), None, f"not valid {ENCODING}: {exc.reason}"
    try:
        row = next(csv.reader([line]), [])
    except csv.Error as exc:
        return line, None, f"unparseable line: {exc}"
    if len(row) < 2:
        return line, None, "missing field delimiter"
    record = Record(primary_field=row[0], secondary_field=FIELD_DELIMITER.join(row[1:]))
    reason = unencodable_reason(record)
    if reason is not None:
        return line, None, reason
    return line, record, ""


def _physical_lines(f: BinaryIO) -> Iterator[tuple[int, bytes]]:
    for number, raw in enumerate(f, start=1):
        raw = raw.rstrip(b"\r\n")
        if raw:
            yield number, raw


def read_source(path: Path | str, policy: MalformedPolicy = "skip") -> List[Record]:
    """
    Read one record source, preserving line order.

    Parameters
    ----------
    path : Path | str
        Text file with one record per line.
    policy : {"skip", "strict"}
        Whether malformed lines are dropped or raise MalformedRecordLine.
    """
    source = Path(path)
    records: List[Record] = []
    dropped = 0
    try:
        with source.open("rb") as f:
            for number, raw in _physical_lines(f):
                line, record, reason = _parse_line(raw)
                if record is not None:
                    records.append(record)
                    continue
                if policy == "strict":
                    raise MalformedRecordLine(line, f"{source}:{number}: {reason}")
                log.debug(
                    "Skipped malformed line",
                    extra={"source": str(source), "line_number": number, "reason": reason},
                )
                dropped += 1
    except FileNotFoundError as exc:
        raise InvalidConfiguration(f"record source not found: {source}") from exc
    except IsADirectoryError as exc:
        raise InvalidConfiguration(f"record source is a directory: {source}") from exc

    if dropped:
        log.warning("Dropped malformed source lines", extra={"source": str(source), "dropped": dropped})
    log.debug("Source loaded", extra={"source": str(source), "records": len(records)})
    return records


def load_records(paths: Sequence[Path | str], policy: MalformedPolicy = "skip") -> List[Record]:
    """Concatenate every source in list order into one record set."""
    records: List[Record] = []
    for path in paths:
        records.extend(read_source(path, policy))
    log.info("Record set loaded", extra={"sources": len(paths), "records": len(records)})
    return records


__all__ = ["load_records", "read_source"]
