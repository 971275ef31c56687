"""
End-to-end tests for `predict_mfe` and `predict_batch`.

Besides the fixed scenarios, these tests re-score every predicted structure
with an independent evaluator built directly from the loop model: each pair
contributes either a hairpin, a stack (when the enclosed pair is adjacent) or
an interior loop. The reported energy must equal that score.
"""
import random

import pytest

from rna_mfe_fold import predict_mfe, predict_batch, MfeFoldingConfig, InvalidFoldingConfigError
from rna_mfe_fold.energies import SimpleEnergyModel, SimpleEnergyParams
from rna_mfe_fold.folding import TracebackConsistencyError
from rna_mfe_fold.folding.common_traceback import TraceResult, is_balanced
from rna_mfe_fold.rules import can_pair
from rna_mfe_fold.structures import Pair


def score_structure(seq, pairs, params, min_loop_size=3):
    """Scores a nested, branch-free structure under the simple loop model."""
    model = SimpleEnergyModel(params=params, min_loop_size=min_loop_size)
    pair_set = sorted(pr.as_tuple() for pr in pairs)
    total = 0.0
    for i, j in pair_set:
        enclosed = [(k, l) for k, l in pair_set
                    if i < k < l < j and not any(i < a < k and l < b < j for a, b in pair_set)]
        assert len(enclosed) <= 1, "the loop model has no multiloops"
        if not enclosed:
            total += model.hairpin(j - i - 1)
        else:
            k, l = enclosed[0]
            if (k, l) == (i + 1, j - 1):
                total += model.stack((seq[i], seq[j]), (seq[k], seq[l]))
            else:
                total += model.interior(i, j, k, l)
    return total


def random_rna(length, seed):
    rng = random.Random(seed)
    return "".join(rng.choices("ACGU", k=length))


# ---------------------- Scenarios ----------------------
def test_hairpin_sequence_is_well_formed():
    result = predict_mfe("GCGCUUCGCC")

    assert len(result.structure) == 10
    assert is_balanced(result.structure)
    assert result.energy < 1e9
    assert result.energy <= 0.0


def test_empty_sequence():
    result = predict_mfe("")

    assert result.as_tuple() == ("", 0.0)
    assert result.pairs == []


@pytest.mark.parametrize("seq", ["AAAAAAAAAAAA", "GGGGGGGG", "ACACACACAC"])
def test_sequence_without_complementary_bases(seq):
    result = predict_mfe(seq)

    assert result.structure == "." * len(seq)
    assert result.energy == 0.0


@pytest.mark.parametrize("seq", ["GAC", "GC", "G", "GAAC"])
def test_too_short_to_pair(seq):
    result = predict_mfe(seq, params=SimpleEnergyParams(hairpin_base=-10.0))

    assert result.structure == "." * len(seq)
    assert result.energy == 0.0


def test_non_canonical_symbols_never_pair():
    params = SimpleEnergyParams(hairpin_base=1.0, hairpin_per_base=0.0, stack_bonus=-5.0)

    result = predict_mfe("GXAAACC", params=params)

    assert result.structure[1] == "."
    assert all(1 not in pr.as_tuple() for pr in result.pairs)


# ---------------------- Properties ----------------------
@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("params", [
    SimpleEnergyParams(),
    SimpleEnergyParams(hairpin_base=1.0, stack_bonus=-4.0, interior_base=0.5),
])
def test_reported_energy_matches_structure(seed, params):
    seq = random_rna(30, seed)

    result = predict_mfe(seq, params=params)

    assert len(result.structure) == len(seq)
    assert is_balanced(result.structure)
    assert result.energy == pytest.approx(score_structure(seq, result.pairs, params), abs=1e-6)
    for pr in result.pairs:
        assert can_pair(seq[pr.base_i], seq[pr.base_j])
        assert pr.loop_len >= 3


def test_prediction_is_deterministic():
    seq = random_rna(40, seed=7)
    params = SimpleEnergyParams(stack_bonus=-3.0)

    first = predict_mfe(seq, params=params)
    second = predict_mfe(seq, params=params)

    assert first == second


@pytest.mark.parametrize("seed", range(3))
def test_energy_monotone_in_loop_bounds(seed):
    """Relaxing either loop bound only adds candidates, so the MFE cannot rise."""
    seq = random_rna(28, seed)
    params = SimpleEnergyParams(hairpin_base=1.0, stack_bonus=-3.0)

    narrow = predict_mfe(seq, MfeFoldingConfig(max_loop_size=2), params=params).energy
    wide = predict_mfe(seq, MfeFoldingConfig(max_loop_size=30), params=params).energy
    assert wide <= narrow + 1e-9

    strict_hairpin = predict_mfe(seq, MfeFoldingConfig(min_loop_size=6), params=params).energy
    loose_hairpin = predict_mfe(seq, MfeFoldingConfig(min_loop_size=3), params=params).energy
    assert loose_hairpin <= strict_hairpin + 1e-9


def test_min_loop_size_is_respected():
    params = SimpleEnergyParams(hairpin_base=1.0, stack_bonus=-4.0)

    result = predict_mfe(random_rna(40, seed=3), MfeFoldingConfig(min_loop_size=5), params=params)

    assert all(pr.loop_len >= 5 for pr in result.pairs)


# ---------------------- Configuration ----------------------
@pytest.mark.parametrize("config", [
    MfeFoldingConfig(tolerance=0.0),
    MfeFoldingConfig(min_loop_size=-2),
    MfeFoldingConfig(max_loop_size=-1),
])
def test_invalid_config_rejected(config):
    with pytest.raises(InvalidFoldingConfigError):
        predict_mfe("GGGAAACCC", config)


def test_energy_model_must_match_config():
    with pytest.raises(InvalidFoldingConfigError):
        predict_mfe("GGGAAACCC", energy_model=SimpleEnergyModel(min_loop_size=5))


def test_custom_energy_model_is_used():
    model = SimpleEnergyModel(params=SimpleEnergyParams(hairpin_base=1.0, hairpin_per_base=0.0, stack_bonus=-5.0))

    result = predict_mfe("GGAAACC", energy_model=model)

    assert result.as_tuple() == ("((...))", pytest.approx(-4.0))


# ---------------------- Batch ----------------------
@pytest.mark.parametrize("executor", ["thread", "process"])
def test_batch_matches_single_predictions(executor):
    seqs = ["GGAAACC", "", "GCGCUUCGCC", random_rna(25, seed=11)]
    params = SimpleEnergyParams(hairpin_base=1.0, hairpin_per_base=0.0, stack_bonus=-5.0)

    results = predict_batch(seqs, params=params, max_workers=2, executor=executor)

    assert [r.sequence for r in results] == seqs
    assert results == [predict_mfe(seq, params=params) for seq in seqs]


def test_batch_empty_input():
    assert predict_batch([]) == []


def test_batch_validates_config_up_front():
    with pytest.raises(InvalidFoldingConfigError):
        predict_batch(["GGAAACC"], MfeFoldingConfig(tolerance=-1.0))


def test_crossing_traceback_pairs_are_rejected(monkeypatch):
    """A recovered pair list that does not nest is reported, not returned."""
    from rna_mfe_fold.folding import predictor

    def crossing_traceback(seq, state, engine):
        return TraceResult(pairs=[Pair(0, 4), Pair(2, 6)], dot_bracket="(.(.).)")

    monkeypatch.setattr(predictor, "traceback_mfe", crossing_traceback)

    with pytest.raises(TracebackConsistencyError):
        predict_mfe("GAGACAC")
