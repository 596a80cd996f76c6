"""Reorder references inside a citation."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from citeshift.exceptions import NothingToShiftError, RecoveryError, SingleReferenceError
from citeshift.models.schemas import Reference, ShiftDirection
from citeshift.services.reference_matcher import index_of

logger = logging.getLogger(__name__)

# Turns a reordered list into freshly parsed references (serialize, then parse)
Rederive = Callable[[list[Reference]], list[Reference]]


@dataclass
class ShiftResult:
    """Result of shifting one reference."""
    references: list[Reference]
    focus_index: int
    moved: bool

    @property
    def focus(self) -> Reference:
        return self.references[self.focus_index]


def swap(references: Sequence[Reference], i: int, j: int) -> list[Reference]:
    """Return a copy of references with positions i and j exchanged."""
    swapped = list(references)
    swapped[i], swapped[j] = swapped[j], swapped[i]
    return swapped


def shift(
    direction: ShiftDirection,
    references: Sequence[Reference],
    current: Optional[Reference],
    rederive: Rederive = list,
) -> ShiftResult:
    """
    Move the current reference one position left or right.

    Shifting left from the first position and right from the last position
    are no-ops. After the swap the list goes through rederive and the moved
    reference is found again by identity, so the caller can follow it.

    Args:
        direction: ShiftDirection.LEFT or ShiftDirection.RIGHT
        references: Ordered references of the citation
        current: Reference under the cursor, None when there is none
        rederive: Serialize-and-parse round trip for the swapped list

    Returns:
        ShiftResult with the new references and the moved reference's index

    Raises:
        SingleReferenceError: The citation holds one reference
        NothingToShiftError: current is not in references
        RecoveryError: The moved reference was lost in the round trip
    """
    if len(references) == 1:
        raise SingleReferenceError()

    index = index_of(references, current) if current is not None else None
    if index is None:
        raise NothingToShiftError()

    target = index - 1 if direction == ShiftDirection.LEFT else index + 1
    if target < 0 or target >= len(references):
        return ShiftResult(references=list(references), focus_index=index, moved=False)

    new_references = rederive(swap(references, index, target))
    focus_index = index_of(new_references, current)
    if focus_index is None:
        raise RecoveryError()

    logger.debug("Shifted %s %s: %d -> %d", current.key, direction.value, index, focus_index)
    return ShiftResult(references=new_references, focus_index=focus_index, moved=True)


def shift_left(references: Sequence[Reference], current: Reference, rederive: Rederive = list) -> ShiftResult:
    return shift(ShiftDirection.LEFT, references, current, rederive)


def shift_right(references: Sequence[Reference], current: Reference, rederive: Rederive = list) -> ShiftResult:
    return shift(ShiftDirection.RIGHT, references, current, rederive)
