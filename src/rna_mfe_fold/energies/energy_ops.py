from __future__ import annotations

from rna_mfe_fold.energies.energy_types import SimpleEnergyParams, BasePair
from rna_mfe_fold.rules.constraints import MIN_HAIRPIN_UNPAIRED, can_pair

DEFAULT_IMPOSSIBLE = 1e9


def hairpin_energy(
    loop_length: int,
    params: SimpleEnergyParams,
    min_loop_size: int = MIN_HAIRPIN_UNPAIRED,
    impossible: float = DEFAULT_IMPOSSIBLE,
) -> float:
    """
    Calculates the free energy of a hairpin loop of `loop_length` unpaired nucleotides.

    Parameters
    ----------
    loop_length : int
        Number of unpaired nucleotides enclosed by the closing pair (`j - i - 1`).
    params : SimpleEnergyParams
        Model coefficients.
    min_loop_size : int, optional
        Shortest hairpin that can form, by default `MIN_HAIRPIN_UNPAIRED`.
    impossible : float, optional
        Sentinel returned for loops that are too short.

    Returns
    -------
    float
        `hairpin_base + hairpin_per_base * loop_length`, or `impossible`.
    """
    if loop_length < min_loop_size:
        return impossible

    return params.hairpin_base + params.hairpin_per_base * loop_length


def stacking_energy(
    outer_pair: BasePair,
    inner_pair: BasePair,
    params: SimpleEnergyParams,
    impossible: float = DEFAULT_IMPOSSIBLE,
) -> float:
    """
    Calculates the stacking free energy of an outer pair on the adjacent inner pair.

    Parameters
    ----------
    outer_pair : BasePair
        Nucleotides `(seq[i], seq[j])` of the closing pair.
    inner_pair : BasePair
        Nucleotides `(seq[i+1], seq[j-1])` of the enclosed pair.
    params : SimpleEnergyParams
        Model coefficients.
    impossible : float, optional
        Sentinel returned when either pair is not canonical.

    Returns
    -------
    float
        `stack_bonus` when both pairs are canonical, otherwise `impossible`.
    """
    if not can_pair(*outer_pair) or not can_pair(*inner_pair):
        return impossible

    return params.stack_bonus


def interior_loop_energy(
    base_i: int,
    base_j: int,
    base_k: int,
    base_l: int,
    params: SimpleEnergyParams,
) -> float:
    """
    Calculates the free energy of an interior loop or bulge.

    The loop is closed by the outer pair `(i, j)` and the inner pair `(k, l)`,
    with `i < k < l < j`. Only the total number of unpaired nucleotides across
    the two arms, `(k - i - 1) + (j - l - 1)`, enters the penalty.

    Returns
    -------
    float
        `interior_base + interior_per_base * unpaired`.
    """
    unpaired = (base_k - base_i - 1) + (base_j - base_l - 1)
    return params.interior_base + params.interior_per_base * unpaired
