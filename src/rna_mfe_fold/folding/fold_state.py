from __future__ import annotations
from dataclasses import dataclass

from rna_mfe_fold.structures import FlatTriMatrix


@dataclass(frozen=True, slots=True)
class MfeFoldState:
    """
    Holds the two DP matrices of one MFE prediction.

    Attributes
    ----------
    v_matrix : FlatTriMatrix
        V[i, j] is the minimum energy of `[i, j]` given that `i` and `j` pair.
        Cells that cannot close a pair hold the "impossible" sentinel.
    w_matrix : FlatTriMatrix
        W[i, j] is the minimum energy of `[i, j]` without constraints on the
        endpoints. `W[i, i] = 0`.
    """
    v_matrix: FlatTriMatrix
    w_matrix: FlatTriMatrix

    @property
    def seq_len(self) -> int:
        return self.w_matrix.size


def make_fold_state(seq_len: int, impossible: float = 1e9) -> MfeFoldState:
    """
    Allocates the V and W matrices for a sequence of length `seq_len`.

    V starts at the `impossible` sentinel everywhere. W starts at 0.0, which
    is also the base case for single nucleotides and for intervals too short
    to hold a pair.
    """
    v_matrix = FlatTriMatrix(seq_len, impossible)
    w_matrix = FlatTriMatrix(seq_len, 0.0)

    return MfeFoldState(v_matrix=v_matrix, w_matrix=w_matrix)
