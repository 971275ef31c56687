from __future__ import annotations
from typing import Optional


class InvalidFoldingConfigError(ValueError):
    """Raised before any DP fill when the folding configuration is malformed."""


class TracebackConsistencyError(RuntimeError):
    """
    Raised when a stored optimum cannot be matched by any recurrence term.

    This happens only when the energy model and the recurrences disagree, or
    when the comparison tolerance is too tight for the accumulated rounding.

    Attributes
    ----------
    matrix : str
        Which table the failing cell belongs to, "W" or "V".
    base_i, base_j : int
        The interval being recovered.
    energy : Optional[float]
        The stored value that could not be explained.
    """
    def __init__(self, matrix: str, base_i: int, base_j: int, energy: Optional[float] = None):
        self.matrix = matrix
        self.base_i = base_i
        self.base_j = base_j
        self.energy = energy
        detail = "" if energy is None else f" (stored energy {energy:.6f})"
        super().__init__(
            f"No recurrence term reproduces {matrix}[{base_i},{base_j}]{detail}; "
            f"energy model and recurrences are inconsistent or the tolerance is too tight."
        )
