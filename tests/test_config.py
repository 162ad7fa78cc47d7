from __future__ import annotations

from pathlib import Path

import pytest

from taxlineage.config import LookupConfig
from taxlineage.errors import ConfigError


def _config(**overrides):
    values = {"database_dir": "db", "input_path": "ids.txt", "output_path": "out.tsv"}
    values.update(overrides)
    return LookupConfig(**values)


def test_defaults_and_paths():
    config = _config()
    assert config.id_kind == "accession"
    assert not config.is_gi
    assert config.nodes_path == Path("db/nodes.dmp")
    assert config.names_path == Path("db/names.dmp")
    assert config.accession_path == Path("db/acc2tax_nucl_all.txt")
    assert config.gi_dump_path == Path("db/gi_taxid_nucl.dmp")


def test_protein_variants():
    config = _config(molecule="protein", id_kind="gi")
    assert config.is_gi
    assert config.gi_dump_path.name == "gi_taxid_prot.dmp"
    assert config.accession_path.name == "acc2tax_prot_all.txt"


@pytest.mark.parametrize(
    "overrides",
    [
        {"id_kind": "taxid"},
        {"molecule": "rna"},
        {"gi_capacity": 0},
        {"node_capacity": 1},
        {"max_depth": 0},
        {"unresolved_marker": ""},
        {"unresolved_marker": "a\tb"},
        {"time_budget_seconds": -1},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ConfigError):
        _config(**overrides)
