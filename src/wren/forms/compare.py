"""Order-insensitive comparison of multi-select values."""

from collections.abc import Iterable


def compare_arrays(a: Iterable[str] = (), b: Iterable[str] = ()) -> bool:
    """True if *a* and *b* contain the same values, in any order.

    Used to compare select-multiple values, which are always lists of
    strings. Duplicates do not matter: ``["a", "a"]`` equals ``["a"]``.
    """
    return set(a) == set(b)
