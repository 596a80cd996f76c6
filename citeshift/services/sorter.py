"""Sort references using bibliography metadata."""

from typing import Callable, Optional, Sequence, Union

from citeshift.models.schemas import Reference

YearLookup = Callable[[str], Optional[Union[int, str]]]


def sort_by_year_descending(
    references: Sequence[Reference],
    year_lookup: YearLookup,
    default: int = 0,
) -> list[Reference]:
    """
    Order references newest first.

    References whose year is missing or not a number get the default year
    and end up after every dated reference. Equal years keep their input
    order.

    Args:
        references: References of one citation
        year_lookup: Maps a key to its publication year
        default: Year used when the lookup has nothing usable

    Returns:
        New list of references
    """
    def year(ref: Reference) -> int:
        value = year_lookup(ref.key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    # sorted() is stable, which keeps ties in input order
    return sorted(references, key=lambda ref: -year(ref))
