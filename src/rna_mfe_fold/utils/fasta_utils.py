from __future__ import annotations
from dataclasses import dataclass
from itertools import groupby
from pathlib import Path
from typing import List


@dataclass(frozen=True, slots=True)
class FastaRecord:
    """One FASTA entry: header text without `>` and the joined sequence lines."""
    name: str
    sequence: str


def read_fasta(path: str | Path) -> List[FastaRecord]:
    """
    Reads all records of a FASTA file.

    Sequence lines are stripped and concatenated; no case or alphabet
    normalization is applied here. Text before the first header is ignored.
    """
    records: List[FastaRecord] = []
    with open(path, 'rt', encoding="utf-8") as fin:
        lines = (line.strip() for line in fin if line.strip())
        for is_header, block in groupby(lines, lambda line: line.startswith('>')):
            block_lines = list(block)
            if is_header:
                # Consecutive headers with nothing between them are empty records.
                records.extend(FastaRecord(name=h[1:].strip(), sequence="") for h in block_lines)
            elif records:
                last = records[-1]
                records[-1] = FastaRecord(name=last.name, sequence="".join(block_lines))
    return records
