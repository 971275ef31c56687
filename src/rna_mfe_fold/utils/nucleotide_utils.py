from typing import Iterator, Tuple

CANONICAL_BASES = frozenset("ACGU")


def normalize_base(base_raw: str) -> str:
    """
    Upper-case a nucleotide base and map T->U so RNA logic can be applied uniformly.

    Parameters
    ----------
    base_raw : str
        Raw single-character nucleotide base.

    Returns
    -------
    str
        Normalized base. Non-string or multi-character input is returned unchanged.
    """
    if not isinstance(base_raw, str):
        return base_raw

    if len(base_raw) != 1:
        return base_raw

    base_norm = base_raw.upper()

    return "U" if base_norm == "T" else base_norm


def normalize_sequence(raw_sequence: str) -> str:
    """
    Strip whitespace, upper-case and convert T to U for a whole sequence.

    Internal whitespace (e.g. wrapped FASTA lines joined with spaces) is removed.
    """
    return "".join(normalize_base(ch) for ch in raw_sequence if not ch.isspace())


def find_non_canonical(seq: str) -> Iterator[Tuple[int, str]]:
    """Yields `(position, symbol)` for every symbol outside {A, C, G, U}."""
    for idx, ch in enumerate(seq):
        if ch not in CANONICAL_BASES:
            yield idx, ch
