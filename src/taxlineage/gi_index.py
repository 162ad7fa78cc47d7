from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from .config import DEFAULT_GI_CAPACITY
from .dumps import iter_dump_fields, parse_id
from .errors import OutOfRangeError

UNMAPPED = 0
MAX_NODE_ID = np.iinfo(np.uint32).max


class GIIndex:
    """
    Dense GI -> node id array. ``np.zeros`` leaves untouched pages
    unallocated, so a large capacity only costs memory for the GI ranges the
    dump actually populates.
    """

    def __init__(self, capacity: int = DEFAULT_GI_CAPACITY) -> None:
        self.capacity = capacity
        self.nodes = np.zeros(capacity, dtype=np.uint32)
        self.loaded = 0
        self.skipped_lines = 0

    @classmethod
    def from_dump(
        cls,
        path: Path,
        *,
        capacity: int = DEFAULT_GI_CAPACITY,
        show_progress: bool = False,
    ) -> "GIIndex":
        index = cls(capacity)
        index.load(path, show_progress=show_progress)
        return index

    def _check_gi(self, gi: int) -> None:
        if gi < 0 or gi >= self.capacity:
            raise OutOfRangeError("GI", gi, self.capacity)

    def set(self, gi: int, node_id: int) -> None:
        self._check_gi(gi)
        self.nodes[gi] = node_id

    def load(self, path: Path, *, show_progress: bool = False) -> int:
        """Read ``gi<TAB>node_id`` rows; a repeated gi keeps its last node."""
        logging.info(f"Opening database file {path}")
        loaded = 0
        for line_no, fields in iter_dump_fields(path, show_progress=show_progress):
            try:
                gi = parse_id(fields[0])
                node_id = parse_id(fields[1])
                if not 0 <= node_id <= MAX_NODE_ID:
                    raise ValueError(node_id)
            except (IndexError, ValueError):
                logging.warning(f"Bad line {line_no} in GI file {path}")
                self.skipped_lines += 1
                continue
            self.set(gi, node_id)
            loaded += 1
        self.loaded += loaded
        logging.info(f"Loaded {loaded} GI mappings from {path}")
        return loaded

    def lookup(self, gi: int) -> int:
        """Return the node id for ``gi`` or ``UNMAPPED``."""
        self._check_gi(gi)
        return int(self.nodes[gi])

    def memory_bytes(self) -> int:
        return int(self.nodes.nbytes)
