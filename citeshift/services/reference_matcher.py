"""Locate references by structural identity."""

from typing import Optional, Sequence

from citeshift.models.schemas import Reference


def index_of(references: Sequence[Reference], target: Reference) -> Optional[int]:
    """
    Find the position of a reference in a citation's reference list.

    References are compared on (key, prefix, suffix) because offsets change
    after every edit. Two references with the same key and annotations are
    indistinguishable, so the first one wins.

    Args:
        references: Ordered references of one citation
        target: Reference to look for, possibly from an older snapshot

    Returns:
        Index of the first structural match, or None
    """
    identity = target.identity
    for index, ref in enumerate(references):
        if ref.identity == identity:
            return index
    return None
