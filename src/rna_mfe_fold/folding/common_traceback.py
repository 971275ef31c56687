from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

from rna_mfe_fold.structures import Pair

UNPAIRED = ord('.')
OPEN = ord('(')
CLOSE = ord(')')


@dataclass(frozen=True, slots=True)
class TraceResult:
    """
    Result of a traceback.

    Attributes
    ----------
    pairs : List[Pair]
        Base pairs `(i, j)`, `i < j`, sorted by 5' index.
    dot_bracket : str
        Same-length annotation using `(`, `)` and `.`.
    """
    pairs: List[Pair]
    dot_bracket: str


def pairs_to_dotbracket(seq_len: int, pairs: Iterable[Pair]) -> str:
    """
    Renders nested base pairs as a dot-bracket string of length `seq_len`.

    Raises
    ------
    IndexError
        If a pair is out of range or not ordered `i < j`.
    """
    annotation = bytearray([UNPAIRED]) * seq_len
    for pr in pairs:
        if not (0 <= pr.base_i < pr.base_j < seq_len):
            raise IndexError(f"Pair ({pr.base_i}, {pr.base_j}) invalid for length {seq_len}")
        annotation[pr.base_i] = OPEN
        annotation[pr.base_j] = CLOSE
    return annotation.decode("ascii")


def dotbracket_to_pairs(db: str) -> Set[Tuple[int, int]]:
    """
    Parses a single-layer dot-bracket string into a set of `(i, j)` pairs.

    Unmatched brackets are ignored; use `is_balanced` to check well-formedness.
    """
    stack: List[int] = []
    out: Set[Tuple[int, int]] = set()
    for idx, ch in enumerate(db):
        if ch == '(':
            stack.append(idx)
        elif ch == ')':
            if stack:
                i = stack.pop()
                out.add((i, idx))
    return out


def is_balanced(db: str) -> bool:
    """
    True if the running count of `(` minus `)` never drops below zero and ends at zero.
    """
    depth = 0
    for ch in db:
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth < 0:
                return False
    return depth == 0
