"""
Unit tests for the simplified loop energy functions and the model wrapper.

The functions are pure and total: geometry that cannot form returns the
"impossible" sentinel rather than raising.
"""
import math

import pytest

from rna_mfe_fold.energies.energy_ops import (
    DEFAULT_IMPOSSIBLE,
    hairpin_energy,
    stacking_energy,
    interior_loop_energy,
)
from rna_mfe_fold.energies import SimpleEnergyParams, SimpleEnergyModel


@pytest.fixture
def params():
    return SimpleEnergyParams(
        hairpin_base=3.0,
        hairpin_per_base=0.1,
        stack_bonus=-2.0,
        interior_base=1.0,
        interior_per_base=0.2,
    )


def test_hairpin_below_minimum_is_impossible(params):
    for loop_length in range(0, 3):
        assert hairpin_energy(loop_length, params, min_loop_size=3) == DEFAULT_IMPOSSIBLE


def test_hairpin_is_affine_and_increasing(params):
    """
    From the minimum size upward the penalty is base + per_base * length.
    """
    energies = [hairpin_energy(length, params, min_loop_size=3) for length in range(3, 12)]

    assert math.isclose(energies[0], 3.3)
    assert math.isclose(energies[-1], 3.0 + 0.1 * 11)
    assert all(a < b for a, b in zip(energies, energies[1:]))


def test_hairpin_respects_custom_minimum_and_sentinel(params):
    assert hairpin_energy(1, params, min_loop_size=1, impossible=50.0) == pytest.approx(3.1)
    assert hairpin_energy(0, params, min_loop_size=1, impossible=50.0) == 50.0


def test_stacking_requires_two_canonical_pairs(params):
    assert stacking_energy(("G", "C"), ("A", "U"), params) == -2.0
    assert stacking_energy(("C", "G"), ("U", "A"), params) == -2.0
    # GU wobble on either side disqualifies the stack.
    assert stacking_energy(("G", "U"), ("G", "C"), params) == DEFAULT_IMPOSSIBLE
    assert stacking_energy(("G", "C"), ("U", "G"), params) == DEFAULT_IMPOSSIBLE
    assert stacking_energy(("G", "C"), ("N", "C"), params, impossible=7.0) == 7.0


def test_interior_loop_counts_both_arms(params):
    """
    The penalty depends only on the total unpaired count (k-i-1) + (j-l-1).
    """
    # 2 unpaired on the left, 3 on the right.
    assert interior_loop_energy(0, 20, 3, 16, params) == pytest.approx(1.0 + 0.2 * 5)
    # Bulge: 4 unpaired on one side only.
    assert interior_loop_energy(0, 20, 5, 19, params) == pytest.approx(1.0 + 0.2 * 4)
    # Asymmetric placements with the same total score the same.
    assert interior_loop_energy(0, 20, 1, 15, params) == pytest.approx(interior_loop_energy(0, 20, 5, 19, params))


def test_interior_loop_increases_with_unpaired(params):
    energies = [interior_loop_energy(0, 30, 1 + d, 29, params) for d in range(10)]
    assert all(a < b for a, b in zip(energies, energies[1:]))


def test_energy_model_dispatches_with_its_settings(params):
    model = SimpleEnergyModel(params=params, min_loop_size=4, impossible=99.0)

    assert model.hairpin(3) == 99.0
    assert model.hairpin(4) == pytest.approx(3.4)
    assert model.stack(("A", "U"), ("G", "C")) == -2.0
    assert model.stack(("A", "A"), ("G", "C")) == 99.0
    assert model.interior(0, 10, 2, 8) == pytest.approx(1.0 + 0.2 * 2)


def test_energy_model_defaults():
    model = SimpleEnergyModel()

    assert model.params == SimpleEnergyParams()
    assert model.min_loop_size == 3
    assert model.impossible == DEFAULT_IMPOSSIBLE
