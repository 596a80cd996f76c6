"""Citation editing operations over a document and a cursor offset.

Each operation parses the document afresh, computes against the snapshot
and returns an EditResult: the offset to move to and at most one span
replacement for the caller to apply. Nothing is kept between calls.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from citeshift.config import EditorConfig
from citeshift.exceptions import (
    InvalidKeyError,
    NotOnCitationError,
    NotOnReferenceError,
    OffsetOutOfRangeError,
    RecoveryError,
)
from citeshift.models.schemas import (
    Citation,
    CompletionMode,
    EditResult,
    KeyCandidate,
    KeySuggestion,
    Motion,
    Reference,
    ShiftDirection,
    SpanReplacement,
    StyleChoice,
)
from citeshift.services import navigator, reorder
from citeshift.services.annotation_editor import update_annotation
from citeshift.services.bibliography import Bibliography
from citeshift.services.key_resolver import rank_keys
from citeshift.services.org_cite import OrgCiteSyntax
from citeshift.services.reference_matcher import index_of
from citeshift.services.sorter import sort_by_year_descending
from citeshift.services.style_table import StyleTable, normalize_style_token

logger = logging.getLogger(__name__)


class Selector(Protocol):
    """Prompt that lets the user pick keys from a candidate list."""

    def select_one(self, prompt: str, candidates: list[KeyCandidate]) -> Optional[str]:
        ...

    def select_many(self, prompt: str, candidates: list[KeyCandidate]) -> list[str]:
        ...


@dataclass
class EditContext:
    """Snapshot of the document around the cursor."""
    text: str
    offset: int
    citations: list[Citation]
    citation: Optional[Citation] = None
    index: Optional[int] = None

    @property
    def reference(self) -> Optional[Reference]:
        if self.citation is None or self.index is None:
            return None
        return self.citation.references[self.index]


class CitationEditor:
    """Edit, reorder and navigate citation references."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        syntax: Optional[OrgCiteSyntax] = None,
        bibliography: Optional[Bibliography] = None,
    ):
        self.config = config or EditorConfig()
        self.syntax = syntax or OrgCiteSyntax()
        self.bibliography = bibliography if bibliography is not None else Bibliography()
        self.styles = StyleTable.from_config(self.config)

    # Context

    def context(self, text: str, offset: int) -> EditContext:
        """Locate the citation and reference under offset."""
        if offset < 0 or offset > len(text):
            raise OffsetOutOfRangeError()

        citations = self.syntax.find_citations(text)
        citation = navigator.citation_at(citations, offset)
        index = navigator.reference_index_at(citation, offset) if citation else None
        return EditContext(text=text, offset=offset, citations=citations, citation=citation, index=index)

    def _citation_context(self, text: str, offset: int) -> EditContext:
        ctx = self.context(text, offset)
        if ctx.citation is None:
            raise NotOnCitationError()
        return ctx

    def _reference_context(self, text: str, offset: int) -> EditContext:
        ctx = self.context(text, offset)
        if ctx.reference is None:
            raise NotOnReferenceError()
        return ctx

    def _rederive(self, citation: Citation) -> Callable[[list[Reference]], list[Reference]]:
        """Serialize references as the citation's contents and parse them back."""
        def rederive(references: list[Reference]) -> list[Reference]:
            contents = self.syntax.serialize_contents(
                references, citation.global_prefix, citation.global_suffix,
            )
            return self.syntax.parse_contents(contents, citation.contents_begin).references
        return rederive

    def _replace_contents(self, citation: Citation, references: Sequence[Reference]) -> SpanReplacement:
        return SpanReplacement(
            begin=citation.contents_begin,
            end=citation.contents_end,
            text=self.syntax.serialize_contents(
                references, citation.global_prefix, citation.global_suffix,
            ),
        )

    def _rewrite(
        self,
        citation: Citation,
        references: list[Reference],
        focus_index: int,
        warnings: Optional[list[str]] = None,
    ) -> EditResult:
        """
        Replace the citation's contents and move to references[focus_index].

        The new contents must parse back into the same references, otherwise
        nothing is emitted.
        """
        new_references = self._rederive(citation)(references)
        if [r.identity for r in new_references] != [r.identity for r in references]:
            logger.debug("Rewritten references of citation at %d do not parse back", citation.begin)
            raise RecoveryError()
        focus_index = min(focus_index, len(new_references) - 1)
        return EditResult(
            offset=new_references[focus_index].begin,
            replacement=self._replace_contents(citation, references),
            warnings=warnings or [],
        )

    # Styles

    def select_style(self, text: str, offset: int) -> list[StyleChoice]:
        """Styles available for the citation at offset, its current one flagged."""
        ctx = self._citation_context(text, offset)
        return self.styles.choices(ctx.citation.style)

    def update_style(self, text: str, offset: int, style: Optional[str]) -> EditResult:
        """
        Set or remove the style token of the citation at offset.

        Only the "[cite/style:" head is rewritten; the references are left
        as they are.
        """
        ctx = self._citation_context(text, offset)
        citation = ctx.citation
        token = normalize_style_token(style)

        head = self.syntax.citation_head(token)
        delta = len(head) - (citation.contents_begin - citation.begin)
        new_offset = offset + delta if offset >= citation.contents_begin else citation.begin

        logger.debug("Style of citation at %d: %r -> %r", citation.begin, citation.style, token)
        return EditResult(
            offset=new_offset,
            replacement=SpanReplacement(begin=citation.begin, end=citation.contents_begin, text=head),
        )

    def citation_command(self, text: str, offset: int) -> str:
        """Export command for the citation at offset."""
        ctx = self._citation_context(text, offset)
        return self.styles.resolve_command(ctx.citation.style)

    # Navigation

    def next_reference(self, text: str, offset: int) -> EditResult:
        ctx = self.context(text, offset)
        return EditResult(offset=navigator.next_reference(ctx.citations, offset))

    def previous_reference(self, text: str, offset: int) -> EditResult:
        ctx = self.context(text, offset)
        return EditResult(offset=navigator.previous_reference(ctx.citations, offset))

    def goto_citation_start(self, text: str, offset: int) -> EditResult:
        ctx = self._citation_context(text, offset)
        return EditResult(offset=navigator.goto_citation_start(text, ctx.citation, offset))

    def goto_citation_end(self, text: str, offset: int) -> EditResult:
        ctx = self._citation_context(text, offset)
        return EditResult(offset=navigator.goto_citation_end(text, ctx.citation, offset))

    def move(self, text: str, offset: int, motion: Motion) -> EditResult:
        motions = {
            Motion.NEXT: self.next_reference,
            Motion.PREVIOUS: self.previous_reference,
            Motion.START: self.goto_citation_start,
            Motion.END: self.goto_citation_end,
        }
        return motions[motion](text, offset)

    # Reordering

    def shift(self, text: str, offset: int, direction: ShiftDirection) -> EditResult:
        """
        Swap the reference at offset with its neighbour.

        The cursor follows the moved reference. At either end of the
        citation nothing happens.
        """
        ctx = self._citation_context(text, offset)
        citation = ctx.citation
        result = reorder.shift(direction, citation.references, ctx.reference, self._rederive(citation))
        if not result.moved:
            return EditResult(offset=offset)

        return EditResult(
            offset=result.focus.begin,
            replacement=self._replace_contents(citation, result.references),
        )

    def shift_left(self, text: str, offset: int) -> EditResult:
        return self.shift(text, offset, ShiftDirection.LEFT)

    def shift_right(self, text: str, offset: int) -> EditResult:
        return self.shift(text, offset, ShiftDirection.RIGHT)

    def sort_by_year(self, text: str, offset: int) -> EditResult:
        """Order the citation's references newest first."""
        ctx = self._citation_context(text, offset)
        citation = ctx.citation
        ordered = sort_by_year_descending(citation.references, self.bibliography.year_of)

        if [r.identity for r in ordered] == [r.identity for r in citation.references]:
            return EditResult(offset=offset)

        new_references = self._rederive(citation)(ordered)
        new_offset = citation.begin
        if ctx.reference is not None:
            focus_index = index_of(new_references, ctx.reference)
            if focus_index is None:
                raise RecoveryError()
            new_offset = new_references[focus_index].begin

        logger.debug("Sorted citation at %d by year: %s", citation.begin, [r.key for r in ordered])
        return EditResult(offset=new_offset, replacement=self._replace_contents(citation, ordered))

    # Deleting and copying

    def delete_reference(self, text: str, offset: int) -> EditResult:
        """
        Remove the reference at offset.

        Removing the only reference removes the whole citation.
        """
        ctx = self._reference_context(text, offset)
        citation, index = ctx.citation, ctx.index

        if len(citation.references) == 1:
            logger.debug("Deleting citation at %d", citation.begin)
            return EditResult(
                offset=citation.begin,
                replacement=SpanReplacement(begin=citation.begin, end=citation.end, text=""),
            )

        remaining = citation.references[:index] + citation.references[index + 1:]
        logger.debug("Deleting reference %s from citation at %d", ctx.reference.key, citation.begin)
        return self._rewrite(citation, remaining, index)

    def kill_reference(self, text: str, offset: int) -> EditResult:
        """Delete the reference at offset and hand its text to the caller."""
        ctx = self._reference_context(text, offset)
        result = self.delete_reference(text, offset)
        result.clipboard_text = self.syntax.serialize_reference(ctx.reference)
        return result

    def copy_reference(self, text: str, offset: int) -> EditResult:
        ctx = self._reference_context(text, offset)
        return EditResult(offset=offset, clipboard_text=self.syntax.serialize_reference(ctx.reference))

    def mark_reference(self, text: str, offset: int) -> EditResult:
        """Select the reference at offset; the cursor goes to its end."""
        ctx = self._reference_context(text, offset)
        ref = ctx.reference
        return EditResult(offset=ref.end, region=(ref.begin, ref.end))

    # Annotations

    def update_annotation(self, text: str, offset: int, prefix: str, suffix: str) -> EditResult:
        """Rewrite the prefix and suffix of the reference at offset."""
        ctx = self._reference_context(text, offset)
        update = update_annotation(
            ctx.citation.references,
            ctx.reference,
            prefix,
            suffix,
            serializer=self.syntax.serialize_reference,
            validator=self.syntax.is_valid_annotation,
            separator=self.syntax.separate_suffix,
        )
        return self._rewrite(ctx.citation, update.references, update.index, update.warnings)

    # Keys

    def annotate(self, key: str) -> str:
        if self.config.annotate is not None:
            return self.config.annotate(key)
        return self.bibliography.describe(key)

    def key_candidates(self, keys: Optional[Sequence[str]] = None) -> list[KeyCandidate]:
        """Completion candidates, all bibliography keys by default."""
        if keys is None:
            keys = sorted(self.bibliography.all_keys())
        return [KeyCandidate(key=key, annotation=self.annotate(key)) for key in keys]

    def suggest_keys(self, text: str, offset: int) -> list[KeySuggestion]:
        """Bibliography keys ranked by closeness to the key at offset."""
        ctx = self._reference_context(text, offset)
        return rank_keys(ctx.reference.key, self.bibliography.all_keys())

    def _check_key(self, key: str) -> None:
        if not self.syntax.is_valid_key(key):
            raise InvalidKeyError(f"invalid citation key: {key!r}")

    def replace_key(self, text: str, offset: int, key: str) -> EditResult:
        """Replace the key of the reference at offset, keeping its annotations."""
        self._check_key(key)
        ctx = self._reference_context(text, offset)
        citation, index = ctx.citation, ctx.index

        references = list(citation.references)
        references[index] = ctx.reference.model_copy(update={"key": key})
        logger.debug("Replacing key %s with %s", ctx.reference.key, key)
        return self._rewrite(citation, references, index)

    def replace_key_with_suggestion(self, text: str, offset: int, selector: Selector) -> EditResult:
        """Let the user pick a replacement for the key at offset among close matches."""
        ctx = self._reference_context(text, offset)
        suggestions = self.suggest_keys(text, offset)
        candidates = self.key_candidates([s.key for s in suggestions])

        chosen = selector.select_one(f"Replace {ctx.reference.key} with: ", candidates)
        if not chosen:
            return EditResult(offset=offset)
        return self.replace_key(text, offset, chosen)

    def insert_keys(self, text: str, offset: int, keys: Sequence[str]) -> EditResult:
        """
        Insert references for keys.

        Inside a citation they go after the reference at offset, or at the
        end when no reference is under the cursor. Elsewhere a new citation
        is inserted at offset.
        """
        for key in keys:
            self._check_key(key)
        ctx = self.context(text, offset)
        new_references = [Reference(key=key) for key in keys]
        if not new_references:
            return EditResult(offset=offset)

        citation = ctx.citation
        if citation is None:
            snippet = self.syntax.new_citation(keys)
            replacement = SpanReplacement(begin=offset, end=offset, text=snippet)
            inserted = navigator.citation_at(
                self.syntax.find_citations(replacement.apply(text)), offset,
            )
            if inserted is None:
                raise RecoveryError()
            return EditResult(offset=inserted.references[0].begin, replacement=replacement)

        position = ctx.index + 1 if ctx.index is not None else len(citation.references)
        references = citation.references[:position] + new_references + citation.references[position:]
        logger.debug("Inserting %s into citation at %d", list(keys), citation.begin)
        return self._rewrite(citation, references, position)

    def complete_key(
        self,
        text: str,
        offset: int,
        selector: Selector,
        mode: CompletionMode = CompletionMode.SINGLE,
    ) -> EditResult:
        """
        Complete keys from the bibliography.

        Single mode replaces the key at offset with the chosen one, or
        inserts a new citation when not on a reference. Multiple mode
        inserts every chosen key.
        """
        ctx = self.context(text, offset)
        candidates = self.key_candidates()

        if mode == CompletionMode.SINGLE:
            chosen = selector.select_one("Key: ", candidates)
            if not chosen:
                return EditResult(offset=offset)
            if ctx.reference is not None:
                return self.replace_key(text, offset, chosen)
            return self.insert_keys(text, offset, [chosen])

        chosen_keys = selector.select_many("Keys: ", candidates)
        if not chosen_keys:
            return EditResult(offset=offset)
        return self.insert_keys(text, offset, chosen_keys)
