from __future__ import annotations
from dataclasses import dataclass, field
from typing import Protocol

from rna_mfe_fold.energies.energy_types import SimpleEnergyParams, BasePair
from rna_mfe_fold.energies.energy_ops import (
    DEFAULT_IMPOSSIBLE, hairpin_energy, stacking_energy, interior_loop_energy,
)
from rna_mfe_fold.rules.constraints import MIN_HAIRPIN_UNPAIRED


class EnergyModelProtocol(Protocol):
    """
    Interface the folding engine requires from an energy model.

    Any implementation (including a nearest-neighbour table lookup) can be
    swapped in as long as each method stays pure and total over its domain.
    """
    min_loop_size: int
    impossible: float

    def hairpin(self, loop_length: int) -> float: ...

    def stack(self, outer_pair: BasePair, inner_pair: BasePair) -> float: ...

    def interior(self, base_i: int, base_j: int, base_k: int, base_l: int) -> float: ...


@dataclass(frozen=True, slots=True)
class SimpleEnergyModel:
    """
    Concrete energy model dispatching to the pure functions in `energy_ops`.

    Attributes
    ----------
    params : SimpleEnergyParams
        Model coefficients.
    min_loop_size : int
        Shortest allowed hairpin loop. Must agree with the folding configuration.
    impossible : float
        Sentinel energy for structures that cannot form.
    """
    params: SimpleEnergyParams = field(default_factory=SimpleEnergyParams)
    min_loop_size: int = MIN_HAIRPIN_UNPAIRED
    impossible: float = DEFAULT_IMPOSSIBLE

    def hairpin(self, loop_length: int) -> float:
        return hairpin_energy(loop_length, self.params, self.min_loop_size, self.impossible)

    def stack(self, outer_pair: BasePair, inner_pair: BasePair) -> float:
        return stacking_energy(outer_pair, inner_pair, self.params, self.impossible)

    def interior(self, base_i: int, base_j: int, base_k: int, base_l: int) -> float:
        return interior_loop_energy(base_i, base_j, base_k, base_l, self.params)
