from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigError

GI = "gi"
ACCESSION = "accession"
NUCLEOTIDE = "nucleotide"
PROTEIN = "protein"

ID_KINDS = (GI, ACCESSION)
MOLECULES = (NUCLEOTIDE, PROTEIN)

DEFAULT_GI_CAPACITY = 1_050_000_000
DEFAULT_NODE_CAPACITY = 10_000_000
DEFAULT_MAX_DEPTH = 64
DEFAULT_UNRESOLVED_MARKER = "__unresolved__"

# Dump file names inside the database directory, keyed by molecule kind.
NODES_FILENAME = "nodes.dmp"
NAMES_FILENAME = "names.dmp"
GI_DUMP_FILENAMES = {
    NUCLEOTIDE: "gi_taxid_nucl.dmp",
    PROTEIN: "gi_taxid_prot.dmp",
}
ACCESSION_FILENAMES = {
    NUCLEOTIDE: "acc2tax_nucl_all.txt",
    PROTEIN: "acc2tax_prot_all.txt",
}


@dataclass
class LookupConfig:
    database_dir: Path
    input_path: Path
    output_path: Path
    id_kind: str = ACCESSION
    molecule: str = NUCLEOTIDE
    gi_capacity: int = DEFAULT_GI_CAPACITY
    node_capacity: int = DEFAULT_NODE_CAPACITY
    max_depth: int = DEFAULT_MAX_DEPTH
    include_root: bool = False
    unresolved_marker: str = DEFAULT_UNRESOLVED_MARKER
    show_progress: bool = True
    time_budget_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        self.database_dir = Path(self.database_dir)
        self.input_path = Path(self.input_path)
        self.output_path = Path(self.output_path)
        if self.id_kind not in ID_KINDS:
            raise ConfigError(f"id_kind must be one of {ID_KINDS}, got {self.id_kind!r}")
        if self.molecule not in MOLECULES:
            raise ConfigError(f"molecule must be one of {MOLECULES}, got {self.molecule!r}")
        if self.gi_capacity <= 0:
            raise ConfigError(f"gi_capacity must be positive, got {self.gi_capacity}")
        if self.node_capacity <= 1:
            raise ConfigError(f"node_capacity must exceed the root id, got {self.node_capacity}")
        if self.max_depth <= 0:
            raise ConfigError(f"max_depth must be positive, got {self.max_depth}")
        if not self.unresolved_marker or "\t" in self.unresolved_marker:
            raise ConfigError("unresolved_marker must be a non-empty string without tabs")
        if self.time_budget_seconds is not None and self.time_budget_seconds <= 0:
            raise ConfigError("time_budget_seconds must be positive when set")

    @property
    def is_gi(self) -> bool:
        return self.id_kind == GI

    @property
    def nodes_path(self) -> Path:
        return self.database_dir / NODES_FILENAME

    @property
    def names_path(self) -> Path:
        return self.database_dir / NAMES_FILENAME

    @property
    def gi_dump_path(self) -> Path:
        return self.database_dir / GI_DUMP_FILENAMES[self.molecule]

    @property
    def accession_path(self) -> Path:
        return self.database_dir / ACCESSION_FILENAMES[self.molecule]
