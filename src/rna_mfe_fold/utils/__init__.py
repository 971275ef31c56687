from rna_mfe_fold.utils.nucleotide_utils import normalize_base, normalize_sequence, find_non_canonical

__all__ = [
    "normalize_base",
    "normalize_sequence",
    "find_non_canonical",
]
