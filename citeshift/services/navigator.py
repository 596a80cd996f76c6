"""Cursor motion over citations and their references.

All functions work on the citations found in the current document and
return the offset to move to. Returning the input offset means there was
nowhere to go.
"""

from typing import Optional, Sequence

from citeshift.models.schemas import Citation


def citation_at(citations: Sequence[Citation], offset: int) -> Optional[Citation]:
    """
    Find the citation containing offset.

    The offset just past the closing bracket still belongs to the citation.
    When two citations touch, the one starting at offset wins.
    """
    found: Optional[Citation] = None
    for citation in citations:
        if citation.begin <= offset <= citation.end:
            if citation.begin == offset:
                return citation
            if found is None:
                found = citation
    return found


def reference_index_at(citation: Citation, offset: int) -> Optional[int]:
    """
    Index of the reference under offset, or None on the style marker or
    common prefix.

    A reference covers everything from its start up to the start of the
    next reference, so the separator after it counts as part of it.
    """
    refs = citation.references
    if not refs or offset < refs[0].begin or offset > citation.contents_end:
        return None

    index = 0
    for i, ref in enumerate(refs):
        if ref.begin <= offset:
            index = i
        else:
            break

    if index == len(refs) - 1 and citation.global_suffix and offset > refs[index].end:
        return None
    return index


def _following(citations: Sequence[Citation], offset: int) -> Optional[Citation]:
    for citation in citations:
        if citation.begin >= offset:
            return citation
    return None


def _preceding(citations: Sequence[Citation], offset: int) -> Optional[Citation]:
    found: Optional[Citation] = None
    for citation in citations:
        if citation.end <= offset:
            found = citation
        else:
            break
    return found


def next_reference(citations: Sequence[Citation], offset: int) -> int:
    """
    Offset of the next reference.

    From the last reference of a citation this crosses into the next
    citation in the document.
    """
    current = citation_at(citations, offset)
    if current is None:
        following = _following(citations, offset)
        return following.references[0].begin if following else offset

    refs = current.references
    index = reference_index_at(current, offset)
    if index is None:
        # On the style marker or common prefix
        if offset < refs[0].begin:
            return refs[0].begin
        index = len(refs) - 1

    if index == len(refs) - 1:
        following = _following(citations, current.end)
        return following.references[0].begin if following else offset

    return refs[min(index + 1, len(refs) - 1)].begin


def previous_reference(citations: Sequence[Citation], offset: int) -> int:
    """
    Offset of the previous reference.

    From the first reference of a citation this moves to the last
    reference of the previous citation.
    """
    current = citation_at(citations, offset)
    if current is None:
        preceding = _preceding(citations, offset)
        return preceding.references[-1].begin if preceding else offset

    refs = current.references
    index = reference_index_at(current, offset)
    if index is None and offset > refs[-1].end:
        # In the common suffix
        return refs[-1].begin
    if not index:
        preceding = _preceding(citations, current.begin)
        return preceding.references[-1].begin if preceding else offset

    return refs[index - 1].begin


def line_start(text: str, offset: int) -> int:
    return text.rfind("\n", 0, offset) + 1


def line_end(text: str, offset: int) -> int:
    end = text.find("\n", offset)
    return len(text) if end == -1 else end


def goto_citation_start(text: str, citation: Citation, offset: int) -> int:
    """Jump to the opening bracket, or to the line start when already there."""
    if offset == citation.begin:
        return line_start(text, offset)
    return citation.begin


def goto_citation_end(text: str, citation: Citation, offset: int) -> int:
    """Jump past the closing bracket, or to the line end when already there."""
    if offset == citation.end:
        return line_end(text, offset)
    return citation.end
