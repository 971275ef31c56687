from __future__ import annotations
import logging
from typing import List, Tuple

from rna_mfe_fold.folding.common_traceback import TraceResult, pairs_to_dotbracket
from rna_mfe_fold.folding.errors import TracebackConsistencyError
from rna_mfe_fold.folding.fold_state import MfeFoldState
from rna_mfe_fold.folding.recurrences import MfeFoldingEngine
from rna_mfe_fold.structures import Pair

logger = logging.getLogger(__name__)

# ('W', i, j) recovers an unconstrained interval, ('V', i, j) one closed by the pair (i, j).
Frame = Tuple[str, int, int]


class MfeTraceback:
    """
    Recovers the optimal structure by replaying the fill decisions.

    No backpointers are stored. At each cell the stored optimum is compared,
    within `config.tolerance`, against the candidate terms in a fixed priority
    order and the first match is followed. Ties are therefore always resolved
    the same way.

    The two recovery procedures (`recover_unconstrained` for W cells and
    `recover_paired` for V cells) each return the frames still to process;
    `run` drives them from an explicit stack so recursion depth does not grow
    with sequence length.
    """

    def __init__(self, seq: str, state: MfeFoldState, engine: MfeFoldingEngine):
        self.seq = seq
        self.state = state
        self.engine = engine
        self.tolerance = engine.config.tolerance
        self.seq_len = len(seq)
        self.pairs: List[Pair] = []

    def _matches(self, stored: float, candidate: float) -> bool:
        return abs(stored - candidate) < self.tolerance

    def _mark(self, i: int, j: int) -> None:
        self.pairs.append(Pair(i, j))

    def _fault(self, matrix: str, i: int, j: int, energy: float) -> TracebackConsistencyError:
        logger.error(f"Traceback found no matching term for {matrix}[{i},{j}] = {energy:.6f} "
                     f"(tolerance {self.tolerance:g})")
        return TracebackConsistencyError(matrix, i, j, energy)

    def recover_unconstrained(self, i: int, j: int) -> List[Frame]:
        """
        Replays W[i, j].

        Priority: `i` unpaired, `j` unpaired, bifurcation (split `k` ascending),
        then `(i, j)` paired.
        """
        if i >= j:
            return []

        w_matrix = self.state.w_matrix
        w_ij = w_matrix.get(i, j)

        if self._matches(w_ij, w_matrix.get(i + 1, j)):
            return [('W', i + 1, j)]

        if self._matches(w_ij, w_matrix.get(i, j - 1)):
            return [('W', i, j - 1)]

        for k in range(i, j):
            if self._matches(w_ij, w_matrix.get(i, k) + w_matrix.get(k + 1, j)):
                return [('W', i, k), ('W', k + 1, j)]

        if self.engine.is_pairable(self.seq, i, j) and self._matches(w_ij, self.state.v_matrix.get(i, j)):
            self._mark(i, j)
            return [('V', i, j)]

        raise self._fault('W', i, j, w_ij)

    def recover_paired(self, i: int, j: int) -> List[Frame]:
        """
        Replays V[i, j] for a pair `(i, j)` that has already been marked.

        Priority: hairpin (terminal), stack on `(i+1, j-1)`, then interior
        loops in `interior_candidates` order.
        """
        v_matrix = self.state.v_matrix
        v_ij = v_matrix.get(i, j)
        energy_model = self.engine.energy_model

        if self._matches(v_ij, energy_model.hairpin(j - i - 1)):
            return []

        stack_energy = self.engine.stack_term(self.seq, i, j, self.state)
        if stack_energy is not None and self._matches(v_ij, stack_energy):
            self._mark(i + 1, j - 1)
            return [('V', i + 1, j - 1)]

        for k, l in self.engine.interior_candidates(i, j):
            if not self.engine.is_pairable(self.seq, k, l):
                continue
            if self._matches(v_ij, v_matrix.get(k, l) + energy_model.interior(i, j, k, l)):
                self._mark(k, l)
                return [('V', k, l)]

        raise self._fault('V', i, j, v_ij)

    def run(self, i: int, j: int) -> TraceResult:
        """Recovers the structure of the unconstrained interval `[i, j]`."""
        stack: List[Frame] = [('W', i, j)]

        while stack:
            which, i, j = stack.pop()
            if which == 'W':
                stack.extend(self.recover_unconstrained(i, j))
            else:
                stack.extend(self.recover_paired(i, j))

        ordered = sorted(self.pairs, key=lambda pr: (pr.base_i, pr.base_j))
        return TraceResult(pairs=ordered, dot_bracket=pairs_to_dotbracket(self.seq_len, ordered))


def traceback_mfe(seq: str, state: MfeFoldState, engine: MfeFoldingEngine) -> TraceResult:
    """
    Reconstructs the optimal structure for the whole sequence from `W[0, N-1]`.

    Parameters
    ----------
    seq : str
        The folded sequence.
    state : MfeFoldState
        Matrices filled by `engine.fill_all_matrices(seq, state)`.
    engine : MfeFoldingEngine
        The engine that filled `state`; its energy model and config are replayed.

    Returns
    -------
    TraceResult
        Sorted base pairs and the dot-bracket annotation.

    Raises
    ------
    TracebackConsistencyError
        If some cell cannot be explained by any recurrence term.
    """
    if len(seq) == 0:
        return TraceResult(pairs=[], dot_bracket="")

    return MfeTraceback(seq, state, engine).run(0, len(seq) - 1)


def traceback_interval(seq: str, state: MfeFoldState, engine: MfeFoldingEngine, i: int, j: int) -> TraceResult:
    """
    Reconstructs the optimal structure of the sub-interval `[i, j]` only.

    The returned annotation still spans the full sequence, with positions
    outside `[i, j]` left unpaired.
    """
    if not (0 <= i <= j < len(seq)):
        raise IndexError(f"Invalid interval [{i}, {j}] for sequence length {len(seq)}")

    return MfeTraceback(seq, state, engine).run(i, j)
