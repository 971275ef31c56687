from __future__ import annotations
from typing import Final

# Minimum number of unpaired nucleotides required in a hairpin loop.
MIN_HAIRPIN_UNPAIRED: Final[int] = 3

# ---- Pairing rules (RNA) -----------------------------------------------------

# Canonical Watson-Crick pairs only, both orientations. GU wobble is not allowed.
_RNA_ALLOWED_PAIRS: Final[frozenset[str]] = frozenset(
    {"AU", "UA", "GC", "CG"}
)


def can_pair(base_i: str, base_j: str) -> bool:
    """
    Return True if nucleotides `base_i` and `base_j` form a canonical
    Watson-Crick pair.

    Bases are expected upper-case; canonicalization (case, T->U) belongs to
    the caller. Anything outside {A, C, G, U} never pairs.

    Parameters
    ----------
    base_i, base_j : str
        Single-character nucleotides.

    Returns
    -------
    bool
        True if (a,b) is in {AU, UA, GC, CG}; False otherwise.
    """
    if not isinstance(base_i, str) or not isinstance(base_j, str):
        return False

    if len(base_i) != 1 or len(base_j) != 1:
        return False

    return (base_i + base_j) in _RNA_ALLOWED_PAIRS


def hairpin_size(i: int, j: int) -> int:
    """
    Compute the number of unpaired nucleotides inside a hairpin closed by (i, j).

    Parameters
    ----------
    i, j : int
        Zero-based indices with i < j.

    Returns
    -------
    int
        `j - i - 1`.
    """
    return j - i - 1


def is_min_hairpin_size(i: int, j: int, min_unpaired: int = MIN_HAIRPIN_UNPAIRED) -> bool:
    """
    Check whether a candidate closing pair (i, j) encloses at least
    `min_unpaired` nucleotides.
    """
    return hairpin_size(i, j) >= min_unpaired
