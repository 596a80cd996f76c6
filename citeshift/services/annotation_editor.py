"""Edit the prefix and suffix of a single reference."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from citeshift.exceptions import InvalidAnnotationError, NotOnReferenceError
from citeshift.models.schemas import Reference
from citeshift.services.org_cite import is_valid_annotation, separate_suffix, serialize_reference
from citeshift.services.reference_matcher import index_of

logger = logging.getLogger(__name__)

PREFIX_WARNING = "prefix not supported here"
SUFFIX_WARNING = "suffix not supported here"


@dataclass
class AnnotationUpdate:
    """Result of rewriting a reference's annotations."""
    references: list[Reference]
    index: int
    text: str
    warnings: list[str] = field(default_factory=list)


def update_annotation(
    references: Sequence[Reference],
    target: Reference,
    prefix: str,
    suffix: str,
    serializer: Callable[[Reference], str] = serialize_reference,
    validator: Callable[[str], bool] = is_valid_annotation,
    separator: Callable[[str, str], str] = separate_suffix,
) -> AnnotationUpdate:
    """
    Replace the prefix and suffix of target.

    Many export commands only render a prefix on the first reference and a
    suffix on the last one. Placing them elsewhere produces a warning but
    the edit is applied anyway.

    Args:
        references: References of the citation
        target: Reference to edit
        prefix: New prefix text
        suffix: New suffix text
        serializer: Renders the updated reference
        validator: Accepts or rejects a prefix or suffix
        separator: Keeps the suffix from running into the key

    Returns:
        AnnotationUpdate with the edited list, the serialized reference and
        any placement warnings

    Raises:
        NotOnReferenceError: target is not in references
        InvalidAnnotationError: prefix or suffix contains citation delimiters
    """
    index = index_of(references, target)
    if index is None:
        raise NotOnReferenceError()

    if not validator(prefix) or not validator(suffix):
        raise InvalidAnnotationError()

    # The parser drops whitespace before a prefix and after a suffix
    prefix = prefix.lstrip()
    suffix = separator(target.key, suffix.rstrip())

    warnings: list[str] = []
    if prefix and index > 0:
        warnings.append(PREFIX_WARNING)
    if suffix and index != len(references) - 1:
        warnings.append(SUFFIX_WARNING)
    for warning in warnings:
        logger.warning("%s (reference %s at position %d)", warning, target.key, index)

    updated = references[index].model_copy(update={"prefix": prefix, "suffix": suffix})
    new_references = list(references)
    new_references[index] = updated

    return AnnotationUpdate(
        references=new_references,
        index=index,
        text=serializer(updated),
        warnings=warnings,
    )
