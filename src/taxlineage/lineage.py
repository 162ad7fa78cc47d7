from __future__ import annotations

import logging
from typing import List

from .config import DEFAULT_MAX_DEPTH
from .errors import CycleOrDepthExceeded, MissingParentError, OutOfRangeError
from .taxonomy import ROOT_ID, TaxonomyTree

UNKNOWN_NAME = "Unknown"
LINEAGE_SEPARATOR = ","


class LineageResolver:
    """
    Turn a node id into its root -> node list of scientific names by walking
    the parent table. The root itself is left out unless ``include_root``.
    Nothing is cached; every call walks the tree again.
    """

    def __init__(
        self,
        tree: TaxonomyTree,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        include_root: bool = False,
    ) -> None:
        self.tree = tree
        self.max_depth = max_depth
        self.include_root = include_root

    def path_to_root(self, node_id: int) -> List[int]:
        """
        Node ids from ``node_id`` up to (not including) the root, leaf first.
        Raises a ``LineageError`` if the chain loops, runs deeper than
        ``max_depth`` or hits a node that was never loaded.
        """
        if node_id < 0 or node_id >= self.tree.capacity:
            raise OutOfRangeError("node id", node_id, self.tree.capacity)
        path: List[int] = []
        seen = set()
        current = node_id
        while current != ROOT_ID:
            if current in seen:
                raise CycleOrDepthExceeded(
                    f"cycle at node {current} while resolving {node_id}", node_id
                )
            if len(path) >= self.max_depth:
                raise CycleOrDepthExceeded(
                    f"lineage of {node_id} deeper than {self.max_depth}", node_id
                )
            if current not in self.tree:
                raise MissingParentError(
                    f"node {current} has no parent entry (resolving {node_id})", node_id
                )
            seen.add(current)
            path.append(current)
            current = self.tree.parent_of(current)
        return path

    def resolve(self, node_id: int) -> List[str]:
        path = self.path_to_root(node_id)
        if self.include_root:
            path.append(ROOT_ID)
        names: List[str] = []
        for current in reversed(path):
            name = self.tree.name_of(current)
            if name is None:
                logging.warning(f"No scientific name for node {current}")
                name = UNKNOWN_NAME
            names.append(name)
        return names

    def lineage_string(self, node_id: int) -> str:
        return LINEAGE_SEPARATOR.join(self.resolve(node_id))
