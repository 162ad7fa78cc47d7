from __future__ import annotations

import logging
from contextlib import ExitStack

from .accession_index import AccessionIndex
from .batch import BatchProcessor, BatchReport
from .config import LookupConfig
from .gi_index import GIIndex
from .lineage import LineageResolver
from .taxonomy import TaxonomyTree


def _megabytes(n_bytes: int) -> int:
    return n_bytes // (1024 * 1024)


def run_lookup(config: LookupConfig) -> BatchReport:
    """
    Load phase followed by query phase. The GI table is built only in GI
    mode; in accession mode the sorted accession file is opened and searched
    in place. Everything loaded here is read-only once the batch starts.
    """
    with ExitStack() as stack:
        gi_index = None
        accession_index = None
        memory = 0
        if config.is_gi:
            logging.info(f"Allocating GI table ({config.gi_capacity} entries)")
            gi_index = GIIndex.from_dump(
                config.gi_dump_path,
                capacity=config.gi_capacity,
                show_progress=config.show_progress,
            )
            memory += gi_index.memory_bytes()
        else:
            accession_index = stack.enter_context(AccessionIndex(config.accession_path))

        logging.info(f"Allocating taxonomy tables ({config.node_capacity} entries)")
        tree = TaxonomyTree.from_dumps(
            config.nodes_path,
            config.names_path,
            capacity=config.node_capacity,
            show_progress=config.show_progress,
        )
        memory += tree.memory_bytes()
        logging.info(f"Memory required: {_megabytes(memory)} MB")

        resolver = LineageResolver(
            tree,
            max_depth=config.max_depth,
            include_root=config.include_root,
        )
        processor = BatchProcessor(
            resolver,
            gi_index=gi_index,
            accession_index=accession_index,
            unresolved_marker=config.unresolved_marker,
            show_progress=config.show_progress,
            time_budget_seconds=config.time_budget_seconds,
        )
        return processor.run(config.input_path, config.output_path)
