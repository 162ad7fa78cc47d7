from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Bytes read per step while scanning back to the start of a record.
READ_BLOCK = 256


@dataclass(frozen=True)
class AccessionRecord:
    accession: str
    version: str
    taxid: int
    gi: int


def _int_field(fields: list, idx: int, line: bytes) -> int:
    if idx >= len(fields) or not fields[idx].strip():
        return 0
    try:
        return int(fields[idx])
    except ValueError:
        logging.warning(f"Non-numeric field {idx} in accession record {line!r}")
        return 0


def parse_record(line: bytes) -> AccessionRecord:
    """
    Parse ``accession<TAB>version<TAB>taxid<TAB>gi``. Absent or unreadable
    numeric fields come back as 0.
    """
    fields = line.rstrip(b"\r\n").split(b"\t")
    return AccessionRecord(
        accession=fields[0].decode("utf-8", errors="replace"),
        version=fields[1].decode("utf-8", errors="replace") if len(fields) > 1 else "",
        taxid=_int_field(fields, 2, line),
        gi=_int_field(fields, 3, line),
    )


class AccessionIndex:
    """
    Binary search over an accession table that is sorted byte-wise by its
    first column. The file is never loaded: each probe seeks to the middle of
    the remaining byte range, steps back to the start of the record it landed
    in, and reads that one line.

    ``low`` is always a record start and ``high`` is either a record start or
    the end of the file, so the search converges exactly and a present record
    is never skipped.

    The instance owns a single file handle and its seek position. Give every
    worker its own instance via ``reopen()``.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._handle = open(self.path, "rb")
        self._handle.seek(0, os.SEEK_END)
        self.size = self._handle.tell()
        self.last_probes = 0
        logging.info(f"Opened accession file {self.path} ({self.size} bytes)")

    def __enter__(self) -> "AccessionIndex":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    def reopen(self) -> "AccessionIndex":
        return AccessionIndex(self.path)

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _record_start(self, pos: int, floor: int) -> int:
        """Offset of the record containing ``pos``, never below ``floor``."""
        end = pos
        while end > floor:
            start = max(floor, end - READ_BLOCK)
            self._handle.seek(start)
            chunk = self._handle.read(end - start)
            newline = chunk.rfind(b"\n")
            if newline != -1:
                return start + newline + 1
            end = start
        return floor

    def _read_line(self, offset: int) -> bytes:
        self._handle.seek(offset)
        return self._handle.readline()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def find(self, accession: str) -> Optional[AccessionRecord]:
        target = accession.encode("utf-8")
        low, high = 0, self.size
        probes = 0
        try:
            while low < high:
                mid = low + (high - low) // 2
                start = self._record_start(mid, low)
                line = self._read_line(start)
                probes += 1
                key = line.split(b"\t", 1)[0].rstrip(b"\r\n")
                logging.debug(f"probe {probes}: [{low}, {high}) mid={mid} key={key!r}")
                if key == target:
                    return parse_record(line)
                if key < target:
                    low = start + len(line)
                else:
                    high = start
            return None
        finally:
            self.last_probes = probes

    def taxid_for(self, accession: str) -> Optional[int]:
        record = self.find(accession)
        return record.taxid if record is not None else None
