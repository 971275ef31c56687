"""
Unit tests for the MFE traceback.

The traceback stores no backpointers; it replays the fill decisions by
comparing each stored optimum against the recurrence terms. Each test folds a
short sequence with coefficients chosen so one structure is clearly optimal,
then checks that the traceback reconstructs it. The consistency tests corrupt
a filled matrix to make sure an unexplainable cell raises instead of being
silently skipped.
"""
import pytest

from rna_mfe_fold.energies import SimpleEnergyParams
from rna_mfe_fold.folding import (
    MfeFoldingConfig,
    TracebackConsistencyError,
    build_engine,
    make_fold_state,
    traceback_mfe,
    traceback_interval,
)
from rna_mfe_fold.folding.common_traceback import dotbracket_to_pairs
from rna_mfe_fold.structures import Pair


# ---------------------- Fixtures ----------------------
@pytest.fixture
def fold():
    """
    Returns a helper that fills the matrices for a sequence and hands back
    `(engine, state)` ready for traceback.
    """
    def run(seq, params, config=None):
        engine = build_engine(config or MfeFoldingConfig(), params)
        state = make_fold_state(len(seq), impossible=engine.config.impossible_energy)
        engine.fill_all_matrices(seq, state)
        return engine, state

    return run


@pytest.fixture
def strong_stack_params():
    """Stacks worth -5 and a flat +1 hairpin make a two-pair helix optimal."""
    return SimpleEnergyParams(hairpin_base=1.0, hairpin_per_base=0.0, stack_bonus=-5.0)


# ---------------------- Structures ----------------------
def test_traceback_stacked_helix(fold, strong_stack_params):
    seq = "GGAAACC"
    engine, state = fold(seq, strong_stack_params)

    trace = traceback_mfe(seq, state, engine)

    assert state.w_matrix.get(0, len(seq) - 1) == pytest.approx(-4.0)
    assert trace.dot_bracket == "((...))"
    assert trace.pairs == [Pair(0, 6), Pair(1, 5)]


def test_traceback_interior_loop(fold):
    """
    Stacking is penalised and the interior loop rewarded, so the outer pair
    encloses (2, 6) across one unpaired base on each side.
    """
    params = SimpleEnergyParams(
        hairpin_base=1.0, hairpin_per_base=0.0, stack_bonus=10.0,
        interior_base=-3.0, interior_per_base=0.5,
    )
    seq = "GAGAAACAC"
    engine, state = fold(seq, params)

    trace = traceback_mfe(seq, state, engine)

    assert state.w_matrix.get(0, len(seq) - 1) == pytest.approx(-1.0)
    assert trace.dot_bracket == "(.(...).)"
    assert trace.pairs == [Pair(0, 8), Pair(2, 6)]


def test_traceback_bifurcation(fold):
    """
    Two favourable hairpins side by side are joined through W[i,k] + W[k+1,j].
    """
    params = SimpleEnergyParams(
        hairpin_base=-1.0, hairpin_per_base=0.0, stack_bonus=-2.0,
        interior_base=5.0, interior_per_base=1.0,
    )
    seq = "GAAACGAAAC"
    engine, state = fold(seq, params)

    trace = traceback_mfe(seq, state, engine)

    assert state.w_matrix.get(0, len(seq) - 1) == pytest.approx(-2.0)
    assert trace.dot_bracket == "(...)(...)"
    assert trace.pairs == [Pair(0, 4), Pair(5, 9)]


def test_traceback_default_params_stays_unpaired(fold):
    """With the default +3 hairpin and -2 stack, a two-pair helix does not pay off."""
    seq = "GGAAACC"
    engine, state = fold(seq, SimpleEnergyParams())

    trace = traceback_mfe(seq, state, engine)

    assert trace.dot_bracket == "......."
    assert trace.pairs == []


def test_traceback_pairs_match_annotation(fold, strong_stack_params):
    seq = "GGGAAACCCAGGGAAACCC"
    engine, state = fold(seq, strong_stack_params)

    trace = traceback_mfe(seq, state, engine)

    assert len(trace.dot_bracket) == len(seq)
    assert dotbracket_to_pairs(trace.dot_bracket) == {pr.as_tuple() for pr in trace.pairs}
    assert trace.pairs == sorted(trace.pairs, key=lambda pr: pr.base_i)


def test_traceback_empty_sequence(fold):
    engine, state = fold("", SimpleEnergyParams())

    trace = traceback_mfe("", state, engine)

    assert trace.dot_bracket == ""
    assert trace.pairs == []


# ---------------------- Sub-interval ----------------------
def test_traceback_interval_leaves_outside_unpaired(fold, strong_stack_params):
    seq = "AAGGAAACCAA"
    engine, state = fold(seq, strong_stack_params)

    trace = traceback_interval(seq, state, engine, 2, 8)

    assert trace.dot_bracket == "..((...)).."
    assert trace.pairs == [Pair(2, 8), Pair(3, 7)]


@pytest.mark.parametrize("i, j", [(-1, 3), (3, 2), (0, 11)])
def test_traceback_interval_rejects_bad_bounds(fold, i, j):
    seq = "AAGGAAACCAA"
    engine, state = fold(seq, SimpleEnergyParams())

    with pytest.raises(IndexError):
        traceback_interval(seq, state, engine, i, j)


# ---------------------- Consistency ----------------------
def test_traceback_raises_on_unexplained_v_cell(fold, strong_stack_params):
    """
    V[0,6] and W[0,6] are overwritten with a value no V term can produce.
    W replays into V, which then has no matching hairpin, stack or interior term.
    """
    seq = "GGAAACC"
    engine, state = fold(seq, strong_stack_params)
    state.v_matrix.set(0, 6, -4.5)
    state.w_matrix.set(0, 6, -4.5)

    with pytest.raises(TracebackConsistencyError) as excinfo:
        traceback_mfe(seq, state, engine)

    err = excinfo.value
    assert (err.matrix, err.base_i, err.base_j) == ("V", 0, 6)
    assert err.energy == pytest.approx(-4.5)


def test_traceback_raises_on_unexplained_w_cell(fold, strong_stack_params):
    seq = "GGAAACC"
    engine, state = fold(seq, strong_stack_params)
    state.w_matrix.set(0, 6, -7.0)

    with pytest.raises(TracebackConsistencyError, match=r"W\[0,6\]") as excinfo:
        traceback_mfe(seq, state, engine)

    assert excinfo.value.matrix == "W"


def test_traceback_tolerance_absorbs_small_drift(fold, strong_stack_params):
    """A stored value off by less than the tolerance is still explained."""
    seq = "GGAAACC"
    config = MfeFoldingConfig(tolerance=1e-3)
    engine, state = fold(seq, strong_stack_params, config)
    state.v_matrix.set(0, 6, -4.0 + 1e-4)
    state.w_matrix.set(0, 6, -4.0 + 1e-4)

    trace = traceback_mfe(seq, state, engine)

    assert trace.dot_bracket == "((...))"
