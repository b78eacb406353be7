"""Nucleotide sequence helpers."""

_COMPLEMENT = {
    "A": "T",
    "a": "T",
    "T": "A",
    "t": "A",
    "C": "G",
    "c": "G",
    "G": "C",
    "g": "C",
}


def reverse_complement(seq: str) -> str:
    """Return the reverse complement of ``seq``.

    Lower-case bases are complemented to upper case; anything that is not
    A, T, C or G becomes ``N``.
    """
    return "".join(_COMPLEMENT.get(base, "N") for base in reversed(seq))