from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Tuple

from tqdm.auto import tqdm

# Plain ASCII digits only; int() alone would also take "+5", "1_0" and
# non-ASCII digits.
ID_RE = re.compile(r"[0-9]+")
SIGNED_ID_RE = re.compile(r"-?[0-9]+")
REPLACEMENT_CHAR = "\ufffd"


def split_dump_line(line: str) -> List[str]:
    """
    Split one dump line on tabs. NCBI dumps separate columns with
    "\\t|\\t", so the pipes land in their own (ignored) fields and the
    useful columns sit at even indices.
    """
    return line.rstrip("\r\n").split("\t")


def iter_dump_fields(
    path: Path,
    *,
    desc: str | None = None,
    show_progress: bool = False,
) -> Iterator[Tuple[int, List[str]]]:
    """
    Yield (line_number, fields) for every non-blank line of a dump file.
    Opening the file is not guarded: a missing reference table is fatal.
    Invalid UTF-8 is decoded to U+FFFD and reported once per file.
    """
    warned = False
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        lines = tqdm(
            handle,
            desc=desc or f"load:{Path(path).name}",
            unit="line",
            disable=not show_progress,
        )
        for line_no, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            if not warned and REPLACEMENT_CHAR in line:
                logging.warning(
                    f"Invalid UTF-8 in {path} (first at line {line_no}); bytes replaced with U+FFFD"
                )
                warned = True
            yield line_no, split_dump_line(line)


def parse_id(text: str) -> int:
    """Parse a non-negative integer id field, raising ValueError on junk."""
    text = text.strip()
    if not ID_RE.fullmatch(text):
        raise ValueError(f"not an id: {text!r}")
    return int(text)
