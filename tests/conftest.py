from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pytest

from taxlineage.lineage import LineageResolver
from taxlineage.taxonomy import TaxonomyTree


def nodes_line(node_id: int, parent_id: int, rank: str = "no rank") -> str:
    return f"{node_id}\t|\t{parent_id}\t|\t{rank}\t|\t\t|\n"


def names_line(node_id: int, name: str, name_class: str = "scientific name") -> str:
    return f"{node_id}\t|\t{name}\t|\t\t|\t{name_class}\t|\n"


def write_accessions(path: Path, records: List[Tuple[str, int]]) -> Path:
    """Write ``accession, version, taxid, gi`` rows sorted byte-wise."""
    rows = sorted(records, key=lambda rec: rec[0].encode("utf-8"))
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        for gi, (accession, taxid) in enumerate(rows, start=1):
            handle.write(f"{accession}\t{accession}.1\t{taxid}\t{gi}\n")
    return path


@pytest.fixture
def taxdump(tmp_path: Path) -> Path:
    """
    Miniature taxonomy database:

        1 (root)
        └── 2 (Bacteria)
            └── 3 (E.coli)
                └── 4 (no scientific name)

    plus 5 <-> 6 (a parent cycle) and 7 whose parent 999 was never loaded.
    GI 100 -> 3, GI 101 -> 4, GI 102 -> 5, GI 103 -> 7, GI 200 -> 2 then 3.
    """
    db = tmp_path / "db"
    db.mkdir()
    (db / "nodes.dmp").write_text(
        "".join(
            [
                nodes_line(1, 1),
                nodes_line(2, 1, "superkingdom"),
                nodes_line(3, 2, "species"),
                nodes_line(4, 3, "strain"),
                nodes_line(5, 6),
                nodes_line(6, 5),
                nodes_line(7, 999),
            ]
        )
    )
    (db / "names.dmp").write_text(
        "".join(
            [
                names_line(1, "root"),
                names_line(2, "Bacteria"),
                names_line(2, "eubacteria", "genbank common name"),
                names_line(3, "Escherichia"),
                names_line(3, "E.coli"),
                names_line(3, "coli bacillus", "common name"),
                names_line(5, "Loop A"),
                names_line(6, "Loop B"),
                names_line(7, "Orphan"),
            ]
        )
    )
    (db / "gi_taxid_nucl.dmp").write_text("100\t3\n101\t4\n102\t5\n103\t7\n200\t2\n200\t3\n")
    (db / "gi_taxid_prot.dmp").write_text("100\t2\n")
    write_accessions(
        db / "acc2tax_nucl_all.txt",
        [("NC_000913", 3), ("AB000001", 2), ("XY123456", 4), ("ZZ000000", 0), ("CY000005", 5)],
    )
    write_accessions(db / "acc2tax_prot_all.txt", [("WP_000001", 2)])
    return db


@pytest.fixture
def tree(taxdump: Path) -> TaxonomyTree:
    return TaxonomyTree.from_dumps(taxdump / "nodes.dmp", taxdump / "names.dmp", capacity=1000)


@pytest.fixture
def resolver(tree: TaxonomyTree) -> LineageResolver:
    return LineageResolver(tree)
