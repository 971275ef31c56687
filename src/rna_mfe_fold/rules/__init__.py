from rna_mfe_fold.rules.constraints import (
    MIN_HAIRPIN_UNPAIRED,
    can_pair,
    hairpin_size,
    is_min_hairpin_size,
)

__all__ = [
    "MIN_HAIRPIN_UNPAIRED",
    "can_pair",
    "hairpin_size",
    "is_min_hairpin_size",
]
