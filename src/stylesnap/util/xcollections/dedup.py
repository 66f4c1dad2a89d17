from collections.abc import Iterable
from typing import TypeVar

_E = TypeVar('_E')


def dedup_list(xs: Iterable[_E]) -> list[_E]:
    """
    Removes duplicates from the specified items,
    preserving the original order of elements.
    """
    return list(dict.fromkeys(xs))
