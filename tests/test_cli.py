from __future__ import annotations

import json

import pytest

from taxlineage.cli import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args(["-d", "db", "-i", "in.txt", "-o", "out.tsv"])
    assert args.id_kind == "accession"
    assert args.molecule == "nucleotide"
    assert args.entries == 1_050_000_000


def test_missing_required_option_exits_with_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main(["-i", "in.txt", "-o", "out.tsv"])
    assert excinfo.value.code == 2


def test_gi_mode_end_to_end(taxdump, tmp_path):
    ids = tmp_path / "ids.txt"
    ids.write_text("100\n555\n101\n")
    out = tmp_path / "out.tsv"
    stats = tmp_path / "stats.json"

    code = main(
        [
            "--gi", "-d", str(taxdump), "-i", str(ids), "-o", str(out),
            "-e", "1000", "--max-node-id", "1000", "--quiet", "--stats-out", str(stats),
        ]
    )

    assert code == 0
    assert out.read_text().splitlines() == [
        "100\tBacteria,E.coli",
        "555\t__unresolved__",
        "101\tBacteria,E.coli,Unknown",
    ]
    payload = json.loads(stats.read_text())
    assert payload["processed"] == 3
    assert payload["unresolved"] == 1
    assert payload["id_kind"] == "gi"


def test_accession_protein_mode(taxdump, tmp_path):
    ids = tmp_path / "ids.txt"
    ids.write_text("WP_000001\n")
    out = tmp_path / "out.tsv"
    code = main(
        ["-p", "-d", str(taxdump), "-i", str(ids), "-o", str(out), "--max-node-id", "1000", "--quiet"]
    )
    assert code == 0
    assert out.read_text() == "WP_000001\tBacteria\n"


def test_include_root_flag(taxdump, tmp_path):
    ids = tmp_path / "ids.txt"
    ids.write_text("NC_000913\n")
    out = tmp_path / "out.tsv"
    main(
        [
            "-d", str(taxdump), "-i", str(ids), "-o", str(out),
            "--max-node-id", "1000", "--include-root", "--quiet",
        ]
    )
    assert out.read_text() == "NC_000913\troot,Bacteria,E.coli\n"


def test_missing_input_returns_failure(taxdump, tmp_path):
    code = main(
        [
            "-d", str(taxdump), "-i", str(tmp_path / "missing.txt"),
            "-o", str(tmp_path / "out.tsv"), "--max-node-id", "1000", "--quiet",
        ]
    )
    assert code == 1


def test_node_capacity_too_small_is_fatal(taxdump, tmp_path):
    ids = tmp_path / "ids.txt"
    ids.write_text("NC_000913\n")
    code = main(
        ["-d", str(taxdump), "-i", str(ids), "-o", str(tmp_path / "out.tsv"), "--max-node-id", "100", "--quiet"]
    )
    assert code == 1


def test_invalid_setting_is_usage_error(taxdump, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["-d", str(taxdump), "-i", "in.txt", "-o", "out.tsv", "--max-depth", "0"])
    assert excinfo.value.code == 2
