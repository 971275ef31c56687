from rna_mfe_fold.structures.pairing import Pair
from rna_mfe_fold.structures.tri_matrix import FlatTriMatrix

__all__ = [
    "Pair",
    "FlatTriMatrix",
]
