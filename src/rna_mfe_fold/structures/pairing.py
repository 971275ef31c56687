from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Pair:
    """
    Immutable (i, j) index pair used to represent a base-paired span.

    Parameters
    ----------
    base_i : int
        Left index (0-based).
    base_j : int
        Right index (0-based), must satisfy j > i in valid uses.

    Notes
    -----
    - `span` is the inclusive length (j - i + 1).
    - `loop_len` is the number of nts enclosed between `i` and `j` (`j - i - 1`).
    """
    base_i: int
    base_j: int

    @property
    def span(self) -> int:
        """Inclusive span length, ``j - i + 1``."""
        return self.base_j - self.base_i + 1

    @property
    def loop_len(self) -> int:
        """Number of nucleotides enclosed by the pair, ``j - i - 1``."""
        return self.base_j - self.base_i - 1

    def as_tuple(self) -> tuple[int, int]:
        return self.base_i, self.base_j
