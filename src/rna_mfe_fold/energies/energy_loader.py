from __future__ import annotations
from dataclasses import fields
from importlib.resources import files as importlib_files
from pathlib import Path

from .data.yaml_io import read_yaml
from .data.parsers import get_section, get_float

from rna_mfe_fold.energies.energy_types import SimpleEnergyParams

DEFAULT_PARAMS_FILE = "simple_energy_model.yaml"


def default_params_path() -> Path:
    """Location of the parameter file bundled with the package."""
    return Path(str(importlib_files("rna_mfe_fold") / "data" / DEFAULT_PARAMS_FILE))


class EnergyParamsLoader:
    """
    Loads the simplified loop-model coefficients from a YAML file.

    The file holds an `energies` mapping whose keys are the field names of
    `SimpleEnergyParams`. Missing keys keep their dataclass default, unknown
    keys are rejected.
    """
    def load(self, yaml_path: str | Path | None = None) -> SimpleEnergyParams:
        """
        Parse the coefficient bundle.

        Parameters
        ----------
        yaml_path : str | Path | None
            Path to the YAML file. Defaults to the bundled parameter file.

        Returns
        -------
        SimpleEnergyParams
            The parsed coefficients.

        Raises
        ------
        ValueError
            If the file is not YAML, the `energies` section is malformed, a
            value is not numeric, or an unknown key is present.
        """
        if yaml_path is None:
            yaml_path = default_params_path()

        data = read_yaml(yaml_path)
        section = get_section(data, "energies")

        known = {f.name: f.default for f in fields(SimpleEnergyParams)}
        unknown = sorted(set(section) - set(known))
        if unknown:
            raise ValueError(f"Unknown energy parameter(s): {', '.join(unknown)}")

        values = {name: get_float(section, name, default) for name, default in known.items()}
        return SimpleEnergyParams(**values)
