from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple
import math
import time
import logging

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from rna_mfe_fold.energies.data.yaml_io import read_yaml
from rna_mfe_fold.energies.data.parsers import get_section, get_float, get_int
from rna_mfe_fold.energies.energy_model import EnergyModelProtocol
from rna_mfe_fold.folding.errors import InvalidFoldingConfigError
from rna_mfe_fold.folding.fold_state import MfeFoldState
from rna_mfe_fold.rules import can_pair, is_min_hairpin_size, MIN_HAIRPIN_UNPAIRED

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MfeFoldingConfig:
    """
    Tunables of the MFE folding kernel.

    Attributes
    ----------
    min_loop_size : int
        Minimum number of unpaired nucleotides a hairpin must enclose. A pair
        `(i, j)` is only considered when `j - i - 1 >= min_loop_size`.
    max_loop_size : int
        Maximum total number of unpaired nucleotides `(k-i-1) + (j-l-1)` in an
        interior loop. Larger loops are never searched; this truncates the
        search space as a modelling approximation in exchange for runtime.
    tolerance : float
        Absolute tolerance used by the traceback to decide that a stored
        optimum equals a recurrence term. Affects which of several tied
        optimal structures is reported.
    impossible_energy : float
        Finite positive sentinel stored in V cells that cannot close a pair.
        Whether a cell is usable is decided by `is_pairable`, so the value
        never competes with real loop energies.
    verbose : bool
        If True, shows a progress bar over interval lengths.
    """
    min_loop_size: int = MIN_HAIRPIN_UNPAIRED
    max_loop_size: int = 30
    tolerance: float = 1e-6
    impossible_energy: float = 1e9
    verbose: bool = False

    def validate(self) -> None:
        """
        Rejects malformed settings.

        Raises
        ------
        InvalidFoldingConfigError
            If any tunable is outside its domain.
        """
        if not (math.isfinite(self.tolerance) and self.tolerance > 0):
            raise InvalidFoldingConfigError(f"tolerance must be a positive finite number, got {self.tolerance}")
        if self.min_loop_size < 0:
            raise InvalidFoldingConfigError(f"min_loop_size must be >= 0, got {self.min_loop_size}")
        if self.max_loop_size < 0:
            raise InvalidFoldingConfigError(f"max_loop_size must be >= 0, got {self.max_loop_size}")
        if not (math.isfinite(self.impossible_energy) and self.impossible_energy > 0):
            raise InvalidFoldingConfigError(
                f"impossible_energy must be a positive finite number, got {self.impossible_energy}"
            )


def load_folding_config(yaml_path: str | Path, verbose: bool = False) -> MfeFoldingConfig:
    """
    Reads the `folding` section of a YAML file into a validated config.

    Keys that are absent keep their defaults.
    """
    defaults = MfeFoldingConfig()
    try:
        section = get_section(read_yaml(yaml_path), "folding")
        config = MfeFoldingConfig(
            min_loop_size=get_int(section, "min_loop_size", defaults.min_loop_size),
            max_loop_size=get_int(section, "max_loop_size", defaults.max_loop_size),
            tolerance=get_float(section, "tolerance", defaults.tolerance),
            impossible_energy=get_float(section, "impossible_energy", defaults.impossible_energy),
            verbose=verbose,
        )
    except ValueError as e:
        raise InvalidFoldingConfigError(str(e)) from e

    config.validate()
    return config


@dataclass(slots=True)
class MfeFoldingEngine:
    """
    Fills the V (pair-closed) and W (unconstrained) matrices bottom-up.

    Both matrices are filled strictly by increasing interval length, so every
    cell read by a recurrence is final before it is used.

    Attributes
    ----------
    energy_model : EnergyModelProtocol
        Scores hairpins, stacks and interior loops.
    config : MfeFoldingConfig
        Loop size bounds, tolerance and sentinel. Validated on construction.
    """
    energy_model: EnergyModelProtocol
    config: MfeFoldingConfig

    def __post_init__(self) -> None:
        self.config.validate()
        if self.energy_model.min_loop_size != self.config.min_loop_size:
            raise InvalidFoldingConfigError(
                f"Energy model min_loop_size={self.energy_model.min_loop_size} does not match "
                f"config min_loop_size={self.config.min_loop_size}"
            )
        if self.energy_model.impossible != self.config.impossible_energy:
            raise InvalidFoldingConfigError(
                f"Energy model sentinel {self.energy_model.impossible} does not match "
                f"config impossible_energy={self.config.impossible_energy}"
            )

    def is_pairable(self, seq: str, i: int, j: int) -> bool:
        """True if `(i, j)` can close a pair: canonical bases and a long enough loop."""
        return is_min_hairpin_size(i, j, self.config.min_loop_size) and can_pair(seq[i], seq[j])

    def interior_candidates(self, i: int, j: int) -> Iterator[Tuple[int, int]]:
        """
        Yields inner pairs `(k, l)`, `i < k < l < j`, within the loop-size budget.

        Order is `k` ascending, then `l` ascending. The traceback relies on
        this order being fixed.
        """
        max_loop = self.config.max_loop_size
        k_max = min(j - 2, i + max_loop + 1)
        for k in range(i + 1, k_max + 1):
            left_unpaired = k - i - 1
            l_min = max(k + 1, j - 1 - (max_loop - left_unpaired))
            for l in range(l_min, j):
                yield k, l

    def stack_term(self, seq: str, i: int, j: int, state: MfeFoldState) -> Optional[float]:
        """
        Energy of `(i, j)` stacked on `(i+1, j-1)`, including `V[i+1, j-1]`.

        Returns None when `(i+1, j-1)` cannot close a pair. Availability is
        decided by `is_pairable`, never by comparing against the sentinel.
        """
        if not self.is_pairable(seq, i + 1, j - 1):
            return None

        inner = state.v_matrix.get(i + 1, j - 1)
        delta_g_stk = self.energy_model.stack((seq[i], seq[j]), (seq[i + 1], seq[j - 1]))

        return delta_g_stk + inner

    def fill_all_matrices(self, seq: str, state: MfeFoldState) -> None:
        """
        Runs the DP over all intervals of `seq`.

        Parameters
        ----------
        seq : str
            The RNA sequence, already canonicalized by the caller.
        state : MfeFoldState
            Freshly allocated matrices of matching size.

        Raises
        ------
        ValueError
            If the state was allocated for a different length.
        """
        n = len(seq)
        if state.seq_len != n:
            raise ValueError(f"Fold state has size {state.seq_len} but sequence length is {n}")

        if n == 0:
            logger.info("MFE DP: empty sequence; nothing to fill.")
            return

        start_time = time.perf_counter()
        logger.info(f"MFE DP for sequence length N={n} "
                    f"(min_loop={self.config.min_loop_size}, max_loop={self.config.max_loop_size})")

        show_progress = self.config.verbose or logger.isEnabledFor(logging.INFO)
        span_iter = tqdm(range(1, n), desc="MFE DP", leave=False, disable=not show_progress)

        # Interval length d = j - i. Length 0 is the W[i, i] = 0 base case set at allocation.
        # Console handlers are routed through tqdm while the bar is live.
        with logging_redirect_tqdm(loggers=[logger]):
            for d in span_iter:
                for i in range(0, n - d):
                    j = i + d
                    self._fill_v_cell(seq, i, j, state)
                    self._fill_w_cell(i, j, state)

        elapsed = time.perf_counter() - start_time
        logger.info(f"MFE DP completed in {elapsed:.2f}s; W[0,{n - 1}] = {state.w_matrix.get(0, n - 1):.3f} kcal/mol")

    def _fill_v_cell(self, seq: str, i: int, j: int, state: MfeFoldState) -> None:
        """
        Fills V[i, j], the best energy of `[i, j]` with `i` and `j` paired.

        Notes
        -----
        The value is the minimum of:
        1.  **Hairpin**: `hairpin(j - i - 1)`.
        2.  **Stack**: `stack + V[i+1, j-1]` when `(i+1, j-1)` pairs.
        3.  **Interior loop / bulge**: `interior(i, j, k, l) + V[k, l]` over
            the `interior_candidates(i, j)` that can close a pair.
        Cells that cannot close a pair keep the sentinel.
        """
        if not self.is_pairable(seq, i, j):
            return

        v_matrix = state.v_matrix

        best_energy = self.energy_model.hairpin(j - i - 1)

        cand_energy = self.stack_term(seq, i, j, state)
        if cand_energy is not None and cand_energy < best_energy:
            best_energy = cand_energy

        for k, l in self.interior_candidates(i, j):
            if not self.is_pairable(seq, k, l):
                continue
            cand_energy = v_matrix.get(k, l) + self.energy_model.interior(i, j, k, l)
            if cand_energy < best_energy:
                best_energy = cand_energy

        v_matrix.set(i, j, best_energy)

    def _fill_w_cell(self, i: int, j: int, state: MfeFoldState) -> None:
        """
        Fills W[i, j] for `i < j`.

        Notes
        -----
        The value is the minimum of `V[i, j]`, `W[i+1, j]`, `W[i, j-1]` and
        `min_{i<=k<j} W[i, k] + W[k+1, j]`.
        """
        w_matrix = state.w_matrix

        best_energy = min(
            state.v_matrix.get(i, j),
            w_matrix.get(i + 1, j),
            w_matrix.get(i, j - 1),
        )

        for k in range(i, j):
            cand_energy = w_matrix.get(i, k) + w_matrix.get(k + 1, j)
            if cand_energy < best_energy:
                best_energy = cand_energy

        w_matrix.set(i, j, best_energy)
