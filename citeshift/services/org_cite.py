"""Org-mode citation syntax: finding, parsing and serializing citations.

A citation looks like

    [cite/t:see @smith2020, p. 4; @doe2019]

with an optional style token after "cite/", references separated by ";",
and each reference written as PREFIX@KEY SUFFIX. A keyless segment before
the first reference is the common (global) prefix, one after the last
reference is the common suffix.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from citeshift.models.schemas import Citation, Reference
from citeshift.services.style_table import style_marker


# Whole citation: [cite:...] or [cite/style:...]
CITATION_PATTERN = re.compile(
    r'\[cite(?:/(?P<style>[^:;@\[\]\s]+))?:(?P<contents>[^\[\]]*)\]'
)

# Key: starts and ends with a word character so trailing punctuation
# ("@smith2020." or "@smith2020,") stays in the suffix
KEY_PATTERN = re.compile(r'@(?P<key>\w(?:[\w\-.:/+]*\w)?)')

SEGMENT_SEPARATOR = ";"
JOIN_SEPARATOR = "; "

# Characters that cannot appear in a prefix or suffix without changing
# how the citation parses
RESERVED_CHARS = frozenset(";@[]")


@dataclass
class ParsedContents:
    """References and common annotations parsed from citation contents."""
    references: list[Reference] = field(default_factory=list)
    global_prefix: str = ""
    global_suffix: str = ""


def parse_contents(contents: str, base_offset: int = 0) -> ParsedContents:
    """
    Parse the text between "cite...:" and "]" into references.

    Args:
        contents: Citation contents
        base_offset: Document offset of the first character of contents

    Returns:
        ParsedContents with references carrying document offsets
    """
    parsed = ParsedContents()
    keyless_after: Optional[str] = None
    position = 0

    for raw in contents.split(SEGMENT_SEPARATOR):
        segment_start = position
        position += len(raw) + len(SEGMENT_SEPARATOR)

        stripped = raw.strip()
        if not stripped:
            continue

        match = KEY_PATTERN.search(raw)
        if not match:
            if not parsed.references:
                parsed.global_prefix = stripped
            else:
                keyless_after = stripped
            continue

        # A keyless segment between two references has no meaning in the
        # syntax; only the one after the last reference is kept
        keyless_after = None

        leading = len(raw) - len(raw.lstrip())
        trailing = len(raw) - len(raw.rstrip())
        parsed.references.append(Reference(
            key=match.group("key"),
            prefix=raw[leading:match.start()],
            suffix=raw[match.end():len(raw) - trailing],
            begin=base_offset + segment_start + leading,
            end=base_offset + segment_start + len(raw) - trailing,
        ))

    if keyless_after is not None:
        parsed.global_suffix = keyless_after

    return parsed


def find_citations(text: str) -> list[Citation]:
    """
    Find every citation in a document, in document order.

    Bracketed "cite" constructs without any reference are skipped.
    """
    citations: list[Citation] = []
    for match in CITATION_PATTERN.finditer(text):
        parsed = parse_contents(match.group("contents"), match.start("contents"))
        if not parsed.references:
            continue
        citations.append(Citation(
            begin=match.start(),
            end=match.end(),
            contents_begin=match.start("contents"),
            contents_end=match.end("contents"),
            style=match.group("style"),
            references=parsed.references,
            global_prefix=parsed.global_prefix,
            global_suffix=parsed.global_suffix,
        ))
    return citations


def separate_suffix(key: str, suffix: str) -> str:
    """
    Keep a suffix from running into the key.

    "@doe2019" followed by "p. 4" would parse as the key "doe2019p", so a
    space is put in front of any suffix the key pattern would absorb.
    """
    match = KEY_PATTERN.match(f"@{key}{suffix}")
    if suffix and match is not None and match.end("key") != len(key) + 1:
        return " " + suffix
    return suffix


def serialize_reference(ref: Reference) -> str:
    return f"{ref.prefix}@{ref.key}{separate_suffix(ref.key, ref.suffix)}"


def serialize_contents(
    references: Sequence[Reference],
    global_prefix: str = "",
    global_suffix: str = "",
) -> str:
    """Inverse of parse_contents, up to whitespace around separators."""
    segments = [serialize_reference(ref) for ref in references]
    if global_prefix:
        segments.insert(0, global_prefix)
    if global_suffix:
        segments.append(global_suffix)
    return JOIN_SEPARATOR.join(segments)


def new_citation_text(keys: Sequence[str], style: Optional[str] = None) -> str:
    refs = [Reference(key=key) for key in keys]
    return f"[cite{style_marker(style)}:{serialize_contents(refs)}]"


def has_reserved_chars(value: str) -> bool:
    return any(char in RESERVED_CHARS for char in value)


def is_valid_annotation(value: str) -> bool:
    return not has_reserved_chars(value)


def is_valid_key(key: str) -> bool:
    match = KEY_PATTERN.fullmatch(f"@{key}")
    return match is not None


class OrgCiteSyntax:
    """Parser/serializer collaborator for org-mode citations."""

    def find_citations(self, text: str) -> list[Citation]:
        return find_citations(text)

    def parse_contents(self, contents: str, base_offset: int = 0) -> ParsedContents:
        return parse_contents(contents, base_offset)

    def serialize_reference(self, ref: Reference) -> str:
        return serialize_reference(ref)

    def serialize_contents(
        self,
        references: Sequence[Reference],
        global_prefix: str = "",
        global_suffix: str = "",
    ) -> str:
        return serialize_contents(references, global_prefix, global_suffix)

    def citation_head(self, style: Optional[str] = None) -> str:
        """Opening text of a citation up to the contents: "[cite/t:"."""
        return f"[cite{style_marker(style)}:"

    def new_citation(self, keys: Sequence[str], style: Optional[str] = None) -> str:
        return new_citation_text(keys, style)

    def is_valid_key(self, key: str) -> bool:
        return is_valid_key(key)

    def separate_suffix(self, key: str, suffix: str) -> str:
        return separate_suffix(key, suffix)

    def is_valid_annotation(self, value: str) -> bool:
        return is_valid_annotation(value)
