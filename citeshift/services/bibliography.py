"""Read-only bibliography index loaded from BibTeX."""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union

import bibtexparser
from bibtexparser.bparser import BibTexParser

from citeshift.exceptions import BibliographyError

logger = logging.getLogger(__name__)


class Bibliography:
    """Map of citation keys to their BibTeX fields."""

    def __init__(self, entries: Optional[dict[str, dict[str, str]]] = None):
        self._entries: dict[str, dict[str, str]] = dict(entries or {})

    @classmethod
    def from_entries(cls, entries: Iterable[dict]) -> "Bibliography":
        """Build from bibtexparser-style entry dicts (key under "ID")."""
        index: dict[str, dict[str, str]] = {}
        for entry in entries:
            key = entry.get("ID")
            if not key:
                continue
            index[key] = {
                name: value for name, value in entry.items() if name != "ID"
            }
        return cls(index)

    @classmethod
    def from_bibtex(cls, content: str) -> "Bibliography":
        """
        Parse BibTeX content.

        Args:
            content: BibTeX source

        Returns:
            Bibliography with one entry per BibTeX key
        """
        parser = BibTexParser(common_strings=True)
        bib_db = bibtexparser.loads(content, parser=parser)
        return cls.from_entries(bib_db.entries)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Bibliography":
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise BibliographyError(f"Cannot read bibliography {path}: {e}") from e

        bibliography = cls.from_bibtex(content)
        logger.info("Loaded %d bibliography entries from %s", len(bibliography), path)
        return bibliography

    def entry_for(self, key: str) -> Optional[dict[str, str]]:
        return self._entries.get(key)

    def all_keys(self) -> set[str]:
        return set(self._entries)

    def year_of(self, key: str) -> Optional[int]:
        """Publication year of an entry, from its year or date field."""
        entry = self._entries.get(key)
        if not entry:
            return None
        return _extract_year(entry.get("year") or entry.get("date", ""))

    def describe(self, key: str) -> str:
        """Short "Author et al. (Year) Title" summary for completion lists."""
        entry = self._entries.get(key)
        if not entry:
            return ""

        parts = []
        authors = [a.strip() for a in entry.get("author", "").split(" and ") if a.strip()]
        if authors:
            first_author = authors[0]
            if "," in first_author:
                first_author = first_author.split(",")[0]
            parts.append(_strip_braces(first_author))
            if len(authors) > 1:
                parts.append("et al.")

        year = self.year_of(key)
        if year:
            parts.append(f"({year})")

        title = _strip_braces(entry.get("title", ""))
        if title:
            if len(title) > 60:
                title = title[:60] + "..."
            parts.append(title)

        return " ".join(parts)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _extract_year(date_str: str) -> Optional[int]:
    """Extract year from date string."""
    if not date_str:
        return None
    match = re.search(r'\d{4}', str(date_str))
    return int(match.group(0)) if match else None


def _strip_braces(value: str) -> str:
    return re.sub(r'[{}]', '', value).strip()
