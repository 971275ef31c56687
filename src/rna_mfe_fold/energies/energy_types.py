from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

# A canonical base pair given by its two nucleotide symbols, e.g. ("G", "C").
BasePair = Tuple[str, str]


@dataclass(frozen=True, slots=True)
class SimpleEnergyParams:
    """
    Immutable container for the coefficients of the simplified loop model.

    The model is sequence-composition agnostic: every term depends only on
    loop geometry, except stacking which only checks that both pairs are
    canonical. Values are free energies in kcal/mol.

    Parameters
    ----------
    hairpin_base : float
        Constant initiation penalty of a hairpin loop.
    hairpin_per_base : float
        Additional penalty per unpaired nucleotide in the hairpin.
    stack_bonus : float
        Favourable (negative) contribution of two stacked canonical pairs.
    interior_base : float
        Constant initiation penalty of an interior loop or bulge.
    interior_per_base : float
        Additional penalty per unpaired nucleotide across both arms.
    """
    hairpin_base: float = 3.0
    hairpin_per_base: float = 0.1
    stack_bonus: float = -2.0
    interior_base: float = 1.0
    interior_per_base: float = 0.2
