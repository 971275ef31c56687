from rna_mfe_fold.energies.energy_types import SimpleEnergyParams
from rna_mfe_fold.energies.energy_loader import EnergyParamsLoader
from rna_mfe_fold.energies.energy_model import SimpleEnergyModel, EnergyModelProtocol

__all__ = [
    "SimpleEnergyParams",
    "EnergyParamsLoader",
    "SimpleEnergyModel",
    "EnergyModelProtocol",
]
