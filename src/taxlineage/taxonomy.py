from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import numpy as np

from .config import DEFAULT_NODE_CAPACITY
from .dumps import iter_dump_fields, parse_id
from .errors import OutOfRangeError

ROOT_ID = 1
SCIENTIFIC_NAME = "scientific name"


class TaxonomyTree:
    """
    Dense node -> parent and node -> scientific name tables built from the
    NCBI ``nodes.dmp`` and ``names.dmp`` dumps. Both tables are indexed
    directly by node id, so ``capacity`` must exceed the largest id in the
    snapshot. A parent of 0 means the node was never loaded.
    """

    def __init__(self, capacity: int = DEFAULT_NODE_CAPACITY) -> None:
        self.capacity = capacity
        self.parent = np.zeros(capacity, dtype=np.uint32)
        self.names: List[Optional[str]] = [None] * capacity
        self.node_count = 0
        self.name_count = 0
        self.skipped_lines = 0

    @classmethod
    def from_dumps(
        cls,
        nodes_path: Path,
        names_path: Path,
        *,
        capacity: int = DEFAULT_NODE_CAPACITY,
        show_progress: bool = False,
    ) -> "TaxonomyTree":
        tree = cls(capacity)
        tree.load_nodes(nodes_path, show_progress=show_progress)
        tree.load_names(names_path, show_progress=show_progress)
        return tree

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _check_id(self, node_id: int, kind: str = "node id") -> None:
        if node_id < 0 or node_id >= self.capacity:
            raise OutOfRangeError(kind, node_id, self.capacity)

    def add_node(self, node_id: int, parent_id: int) -> None:
        self._check_id(node_id)
        self._check_id(parent_id, "parent id")
        self.parent[node_id] = parent_id

    def set_name(self, node_id: int, name: str) -> None:
        self._check_id(node_id)
        self.names[node_id] = name

    def load_nodes(self, path: Path, *, show_progress: bool = False) -> int:
        logging.info(f"Opening database file {path}")
        loaded = 0
        for line_no, fields in iter_dump_fields(path, show_progress=show_progress):
            try:
                node_id = parse_id(fields[0])
                parent_id = parse_id(fields[2])
            except (IndexError, ValueError):
                logging.warning(f"Bad line {line_no} in nodes file {path}")
                self.skipped_lines += 1
                continue
            self.add_node(node_id, parent_id)
            loaded += 1
        self.node_count += loaded
        logging.info(f"Loaded {loaded} nodes from {path}")
        return loaded

    def load_names(self, path: Path, *, show_progress: bool = False) -> int:
        """
        Keep only ``scientific name`` rows. A row cut short before its name
        class column is malformed and skipped.
        A later row for the same node replaces an earlier one.
        """
        logging.info(f"Opening database file {path}")
        loaded = 0
        for line_no, fields in iter_dump_fields(path, show_progress=show_progress):
            if len(fields) < 7:
                logging.warning(f"Truncated line {line_no} in names file {path}")
                self.skipped_lines += 1
                continue
            if fields[6] != SCIENTIFIC_NAME:
                continue
            try:
                node_id = parse_id(fields[0])
            except ValueError:
                logging.warning(f"Bad line {line_no} in names file {path}")
                self.skipped_lines += 1
                continue
            self.set_name(node_id, fields[2])
            loaded += 1
        self.name_count += loaded
        logging.info(f"Loaded {loaded} scientific names from {path}")
        return loaded

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, node_id: int) -> bool:
        return 0 < node_id < self.capacity and self.parent[node_id] != 0

    def parent_of(self, node_id: int) -> int:
        self._check_id(node_id)
        return int(self.parent[node_id])

    def name_of(self, node_id: int) -> Optional[str]:
        self._check_id(node_id)
        return self.names[node_id]

    def memory_bytes(self) -> int:
        """Rough footprint of both tables, for the post-load report."""
        pointers = self.capacity * 8
        strings = sum(len(name) + 1 for name in self.names if name is not None)
        return int(self.parent.nbytes) + pointers + strings
