from __future__ import annotations
import concurrent.futures
import logging
import time
from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from rna_mfe_fold.energies.energy_model import EnergyModelProtocol, SimpleEnergyModel
from rna_mfe_fold.energies.energy_types import SimpleEnergyParams
from rna_mfe_fold.folding.common_traceback import dotbracket_to_pairs, is_balanced
from rna_mfe_fold.folding.errors import TracebackConsistencyError
from rna_mfe_fold.folding.fold_state import make_fold_state
from rna_mfe_fold.folding.recurrences import MfeFoldingConfig, MfeFoldingEngine
from rna_mfe_fold.folding.traceback import traceback_mfe
from rna_mfe_fold.structures import Pair

logger = logging.getLogger(__name__)

ExecutorKind = Literal["thread", "process"]


@dataclass(frozen=True, slots=True)
class MfeResult:
    """
    Outcome of one prediction.

    Attributes
    ----------
    sequence : str
        The folded sequence.
    structure : str
        Dot-bracket annotation, same length as `sequence`.
    energy : float
        `W[0, N-1]`, or 0.0 for the empty sequence.
    pairs : List[Pair]
        Base pairs sorted by 5' index.
    """
    sequence: str
    structure: str
    energy: float
    pairs: List[Pair]

    def as_tuple(self) -> tuple[str, float]:
        """The `(predicted_structure, mfe_energy)` pair."""
        return self.structure, self.energy


def build_engine(
    config: Optional[MfeFoldingConfig] = None,
    params: Optional[SimpleEnergyParams] = None,
    energy_model: Optional[EnergyModelProtocol] = None,
) -> MfeFoldingEngine:
    """
    Creates a folding engine whose energy model agrees with `config`.

    When no `energy_model` is given, a `SimpleEnergyModel` is built from
    `params` using the config's minimum loop size and sentinel.

    Raises
    ------
    InvalidFoldingConfigError
        If the config is malformed or disagrees with a supplied energy model.
    """
    if config is None:
        config = MfeFoldingConfig()
    config.validate()

    if energy_model is None:
        energy_model = SimpleEnergyModel(
            params=params if params is not None else SimpleEnergyParams(),
            min_loop_size=config.min_loop_size,
            impossible=config.impossible_energy,
        )

    return MfeFoldingEngine(energy_model=energy_model, config=config)


def fold_with_engine(seq: str, engine: MfeFoldingEngine) -> MfeResult:
    """
    Fills the matrices for `seq` and recovers its MFE structure.

    The fill completes before the traceback starts; both use matrices owned
    by this call only.

    Raises
    ------
    TracebackConsistencyError
        If the traceback fails, or its pairs cross or overlap.
    """
    n = len(seq)
    state = make_fold_state(n, impossible=engine.config.impossible_energy)
    engine.fill_all_matrices(seq, state)

    trace = traceback_mfe(seq, state, engine)
    energy = state.w_matrix.get(0, n - 1) if n > 0 else 0.0

    # Every recovered pair must appear once in a properly nested annotation.
    paired = {pr.as_tuple() for pr in trace.pairs}
    if not is_balanced(trace.dot_bracket) or dotbracket_to_pairs(trace.dot_bracket) != paired:
        logger.error(f"Recovered pairs do not form a nested structure: {sorted(paired)}")
        raise TracebackConsistencyError("W", 0, n - 1, energy)

    return MfeResult(sequence=seq, structure=trace.dot_bracket, energy=energy, pairs=trace.pairs)


def predict_mfe(
    seq: str,
    config: Optional[MfeFoldingConfig] = None,
    *,
    params: Optional[SimpleEnergyParams] = None,
    energy_model: Optional[EnergyModelProtocol] = None,
) -> MfeResult:
    """
    Predicts the minimum free energy structure of one sequence.

    Parameters
    ----------
    seq : str
        Upper-case RNA sequence. Symbols outside {A, C, G, U} are kept but never pair.
    config : Optional[MfeFoldingConfig]
        Kernel tunables; defaults to `MfeFoldingConfig()`.
    params : Optional[SimpleEnergyParams]
        Coefficients for the default energy model.
    energy_model : Optional[EnergyModelProtocol]
        A replacement energy model. Must agree with `config`.

    Returns
    -------
    MfeResult
        The structure, its energy and its base pairs.

    Raises
    ------
    InvalidFoldingConfigError
        Before any work, if the configuration is malformed.
    TracebackConsistencyError
        If the traceback cannot replay a stored optimum.
    """
    engine = build_engine(config, params, energy_model)

    start_time = time.perf_counter()
    result = fold_with_engine(seq, engine)
    elapsed = time.perf_counter() - start_time

    logger.info(f"Folded N={len(seq)} in {elapsed:.2f}s: {result.energy:.3f} kcal/mol, {len(result.pairs)} pairs")
    return result


def predict_batch(
    seqs: Sequence[str],
    config: Optional[MfeFoldingConfig] = None,
    *,
    params: Optional[SimpleEnergyParams] = None,
    max_workers: Optional[int] = None,
    executor: ExecutorKind = "thread",
) -> List[MfeResult]:
    """
    Folds independent sequences concurrently.

    Each sequence gets its own matrices, so workers share nothing mutable.
    Results are returned in input order.

    Parameters
    ----------
    seqs : Sequence[str]
        Sequences to fold.
    config, params
        As for `predict_mfe`; the same settings apply to every sequence.
    max_workers : Optional[int]
        Pool size, `None` lets `concurrent.futures` decide.
    executor : {"thread", "process"}
        Worker kind. Processes sidestep the GIL for long sequences.
    """
    engine = build_engine(config, params)
    if not seqs:
        return []

    pool_cls = (concurrent.futures.ProcessPoolExecutor if executor == "process"
                else concurrent.futures.ThreadPoolExecutor)

    logger.info(f"Folding batch of {len(seqs)} sequences with {executor} pool (max_workers={max_workers})")
    with pool_cls(max_workers=max_workers) as pool:
        futures = [pool.submit(fold_with_engine, seq, engine) for seq in seqs]
        return [future.result() for future in futures]
