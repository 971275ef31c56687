from __future__ import annotations
from typing import Tuple

import numpy as np


class FlatTriMatrix:
    """
    Upper-triangular DP table stored in a single flat NumPy buffer.

    Only cells with `i <= j` exist. Row `i` holds the `N - i` cells
    `(i, i) .. (i, N-1)`, and rows are laid end to end, so the linear
    position of `(i, j)` is `row_offset(i) + (j - i)` with
    `row_offset(i) = i * N - i * (i - 1) / 2`.

    Every `get`/`set` is bounds-checked. The fill loop goes through the same
    accessors as the traceback.
    """
    __slots__ = ("_seq_len", "_data")

    def __init__(self, seq_len: int, fill: float):
        if seq_len < 0:
            raise ValueError(f"Sequence length must be non-negative, got {seq_len}")
        self._seq_len = seq_len
        self._data = np.full(seq_len * (seq_len + 1) // 2, fill, dtype=np.float64)

    @property
    def size(self) -> int:
        """Returns the sequence length N that defines the matrix dimensions."""
        return self._seq_len

    @property
    def shape(self) -> Tuple[int, int]:
        """Returns the logical matrix shape `(N, N)`."""
        return self._seq_len, self._seq_len

    @property
    def n_cells(self) -> int:
        """Number of allocated cells, `N * (N + 1) / 2`."""
        return int(self._data.shape[0])

    def _row_offset(self, base_i: int) -> int:
        return base_i * self._seq_len - (base_i * (base_i - 1)) // 2

    def linear_index(self, base_i: int, base_j: int) -> int:
        """
        Maps `(i, j)` to its position in the flat buffer.

        Parameters
        ----------
        base_i : int
            The row index (0-based).
        base_j : int
            The column index (0-based), `j >= i`.

        Returns
        -------
        int
            The linear position of the cell.

        Raises
        ------
        IndexError
            If `(i, j)` lies outside the upper triangle.
        """
        if base_i < 0 or base_j < 0 or base_i >= self._seq_len or base_j >= self._seq_len or base_j < base_i:
            raise IndexError(f"TriMatrix invalid index: (i={base_i}, j={base_j}) for N={self._seq_len}")
        return self._row_offset(base_i) + (base_j - base_i)

    def get(self, base_i: int, base_j: int) -> float:
        """Retrieves the value at cell `(i, j)` as a Python float."""
        return float(self._data[self.linear_index(base_i, base_j)])

    def set(self, base_i: int, base_j: int, value: float) -> None:
        """Stores `value` at cell `(i, j)`."""
        self._data[self.linear_index(base_i, base_j)] = value
