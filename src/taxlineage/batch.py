from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, TextIO, Tuple

from tqdm.auto import tqdm

from .accession_index import AccessionIndex
from .config import DEFAULT_UNRESOLVED_MARKER
from .dumps import REPLACEMENT_CHAR, SIGNED_ID_RE
from .errors import ConfigError, DeadlineExceeded, LineageError, OutOfRangeError
from .gi_index import UNMAPPED, GIIndex
from .lineage import LineageResolver

BAD_FORMAT = "bad_format"
OUT_OF_RANGE = "out_of_range"
UNMAPPED_ID = "unmapped"
NOT_FOUND = "not_found"
LINEAGE_FAILED = "lineage_error"


@dataclass
class BatchReport:
    processed: int
    resolved: int
    unresolved: int
    elapsed_seconds: float
    throughput: float
    failures: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def chomp(line: str) -> str:
    """Drop trailing whitespace and control characters."""
    end = len(line)
    while end > 0 and line[end - 1] <= " ":
        end -= 1
    return line[:end]


class BatchProcessor:
    """
    Resolve a stream of identifiers to lineages, writing exactly one output
    line per input line. Exactly one of ``gi_index`` (GI mode) or
    ``accession_index`` (accession mode) must be supplied.
    """

    def __init__(
        self,
        resolver: LineageResolver,
        *,
        gi_index: Optional[GIIndex] = None,
        accession_index: Optional[AccessionIndex] = None,
        unresolved_marker: str = DEFAULT_UNRESOLVED_MARKER,
        show_progress: bool = True,
        time_budget_seconds: Optional[float] = None,
    ) -> None:
        if (gi_index is None) == (accession_index is None):
            raise ConfigError("BatchProcessor needs exactly one of gi_index or accession_index")
        self.resolver = resolver
        self.gi_index = gi_index
        self.accession_index = accession_index
        self.unresolved_marker = unresolved_marker
        self.show_progress = show_progress
        self.time_budget_seconds = time_budget_seconds

    # ------------------------------------------------------------------
    # Per-identifier resolution
    # ------------------------------------------------------------------

    def _start_node_for_gi(self, query: str) -> Tuple[int, Optional[str]]:
        if not SIGNED_ID_RE.fullmatch(query):
            logging.warning(f"Bad GI ({query!r}) in request file")
            return UNMAPPED, BAD_FORMAT
        gi = int(query)
        if gi < 1 or gi >= self.gi_index.capacity:
            logging.warning(f"Bad GI ({gi}) outside [1, {self.gi_index.capacity})")
            return UNMAPPED, OUT_OF_RANGE
        node_id = self.gi_index.lookup(gi)
        if node_id == UNMAPPED:
            logging.warning(f"GI ({gi}) has no taxonomy node")
            return UNMAPPED, UNMAPPED_ID
        return node_id, None

    def _start_node_for_accession(self, query: str) -> Tuple[int, Optional[str]]:
        if not query:
            logging.warning("Empty accession in request file")
            return UNMAPPED, BAD_FORMAT
        record = self.accession_index.find(query)
        if record is None:
            logging.warning(f"Couldn't find: [{query}]")
            return UNMAPPED, NOT_FOUND
        if record.taxid == 0:
            logging.warning(f"Accession {query} has no taxid")
            return UNMAPPED, UNMAPPED_ID
        return record.taxid, None

    def resolve_query(self, query: str) -> Tuple[str, Optional[str]]:
        """
        Return ``(text, failure_reason)`` for one trimmed identifier. ``text``
        is the lineage, or the unresolved marker when ``failure_reason`` is
        set.
        """
        if self.gi_index is not None:
            node_id, reason = self._start_node_for_gi(query)
        else:
            node_id, reason = self._start_node_for_accession(query)
        if reason is None:
            try:
                return self.resolver.lineage_string(node_id), None
            except OutOfRangeError as exc:
                logging.warning(f"{query}: {exc}")
                reason = OUT_OF_RANGE
            except LineageError as exc:
                logging.warning(f"{query}: {exc}")
                reason = LINEAGE_FAILED
        return self.unresolved_marker, reason

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def process_lines(self, lines: Iterable[str], out: TextIO) -> BatchReport:
        failures: Counter = Counter()
        processed = 0
        start = time.perf_counter()
        deadline = None
        if self.time_budget_seconds is not None:
            deadline = time.monotonic() + self.time_budget_seconds

        warned_encoding = False
        progress = tqdm(lines, desc="resolve", unit="id", disable=not self.show_progress)
        try:
            for raw_line in progress:
                if deadline is not None and time.monotonic() > deadline:
                    raise DeadlineExceeded(
                        f"time budget of {self.time_budget_seconds}s exhausted after {processed} IDs"
                    )
                query = chomp(raw_line)
                if not warned_encoding and REPLACEMENT_CHAR in query:
                    logging.warning(
                        f"Invalid UTF-8 in request line {processed + 1}; bytes replaced with U+FFFD"
                    )
                    warned_encoding = True
                text, reason = self.resolve_query(query)
                if reason is not None:
                    failures[reason] += 1
                out.write(f"{query}\t{text}\n")
                processed += 1
        finally:
            progress.close()

        elapsed = time.perf_counter() - start
        unresolved = sum(failures.values())
        report = BatchReport(
            processed=processed,
            resolved=processed - unresolved,
            unresolved=unresolved,
            elapsed_seconds=elapsed,
            throughput=processed / elapsed if elapsed and processed else 0.0,
            failures=dict(failures),
        )
        logging.info(f"Done. Processed {processed} IDs ({unresolved} unresolved).")
        return report

    def run(self, input_path: Path, output_path: Path) -> BatchReport:
        """Open both files up front; failing to open either is fatal."""
        with open(input_path, "r", encoding="utf-8", errors="replace") as fp_in:
            Path(output_path).parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as fp_out:
                return self.process_lines(fp_in, fp_out)
