from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Sequence

from . import __version__
from .config import (
    ACCESSION,
    DEFAULT_GI_CAPACITY,
    DEFAULT_MAX_DEPTH,
    DEFAULT_NODE_CAPACITY,
    DEFAULT_UNRESOLVED_MARKER,
    GI,
    LookupConfig,
    NUCLEOTIDE,
    PROTEIN,
)
from .errors import DeadlineExceeded, TaxLineageError
from .pipeline import run_lookup


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )


def _write_json(path: Path, payload: Dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taxlineage",
        description="Provide batch taxonomy information for Genbank IDs or Accessions.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    kind = parser.add_mutually_exclusive_group()
    kind.add_argument(
        "-a", "--accession", dest="id_kind", action="store_const", const=ACCESSION,
        help="Query is accession IDs [default].",
    )
    kind.add_argument(
        "-g", "--gi", dest="id_kind", action="store_const", const=GI,
        help="Query is Genbank IDs.",
    )
    molecule = parser.add_mutually_exclusive_group()
    molecule.add_argument(
        "-n", "--nucleotide", dest="molecule", action="store_const", const=NUCLEOTIDE,
        help="Query IDs are nucleotide [default].",
    )
    molecule.add_argument(
        "-p", "--protein", dest="molecule", action="store_const", const=PROTEIN,
        help="Query IDs are protein.",
    )
    parser.set_defaults(id_kind=ACCESSION, molecule=NUCLEOTIDE)

    parser.add_argument(
        "-d", "--database", type=Path, required=True,
        help="Directory containing NCBI taxonomy files.",
    )
    parser.add_argument(
        "-i", "--input", type=Path, required=True,
        help="File of IDs (GI or Accession), one per line.",
    )
    parser.add_argument("-o", "--output", type=Path, required=True, help="Filename of output file.")
    parser.add_argument(
        "-e", "--entries", type=int, default=DEFAULT_GI_CAPACITY,
        help=f"Max GI entries (default {DEFAULT_GI_CAPACITY}).",
    )
    parser.add_argument(
        "--max-node-id", type=int, default=DEFAULT_NODE_CAPACITY,
        help="Size of the taxonomy tables; every node id must be below it.",
    )
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    parser.add_argument(
        "--include-root", action="store_true",
        help="Start each lineage with the root node's name.",
    )
    parser.add_argument(
        "--unresolved-marker", default=DEFAULT_UNRESOLVED_MARKER,
        help="Text written for IDs that cannot be resolved.",
    )
    parser.add_argument(
        "--time-budget", type=float,
        help="Stop the batch after this many seconds (output is left truncated).",
    )
    parser.add_argument("--stats-out", type=Path, help="Optional JSON summary of the run.")
    parser.add_argument("--quiet", action="store_true", help="Disable progress bars.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    logging.info(f"taxlineage {__version__}")

    try:
        config = LookupConfig(
            database_dir=args.database,
            input_path=args.input,
            output_path=args.output,
            id_kind=args.id_kind,
            molecule=args.molecule,
            gi_capacity=args.entries,
            node_capacity=args.max_node_id,
            max_depth=args.max_depth,
            include_root=args.include_root,
            unresolved_marker=args.unresolved_marker,
            show_progress=not args.quiet,
            time_budget_seconds=args.time_budget,
        )
    except TaxLineageError as exc:
        parser.error(str(exc))

    try:
        report = run_lookup(config)
    except DeadlineExceeded as exc:
        logging.error(f"Stopped early: {exc}. {config.output_path} is incomplete.")
        return 1
    except (OSError, TaxLineageError) as exc:
        logging.error(f"{exc}")
        return 1

    if args.stats_out:
        _write_json(
            args.stats_out,
            {
                **report.to_dict(),
                "id_kind": config.id_kind,
                "molecule": config.molecule,
                "input": str(config.input_path),
                "output": str(config.output_path),
            },
        )
        logging.info(f"Stats -> {args.stats_out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
