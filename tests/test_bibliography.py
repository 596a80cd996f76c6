"""Tests for the bibliography index."""

import pytest

from citeshift.exceptions import BibliographyError
from citeshift.services.bibliography import Bibliography


BIBTEX = """
@article{smith2020,
  author = {Smith, John and Doe, Jane},
  title = {A {Study} of Citation Order},
  journal = {Journal of Testing},
  year = {2020},
}

@book{lee2021,
  author = {Kim Lee},
  title = {Reordering Things},
  date = {2021-05-01},
}

@misc{undated,
  title = {No Year Here},
}
"""


class TestFromBibtex:
    """Tests for loading BibTeX content."""

    def test_keys(self):
        bib = Bibliography.from_bibtex(BIBTEX)

        assert bib.all_keys() == {"smith2020", "lee2021", "undated"}
        assert len(bib) == 3
        assert "smith2020" in bib
        assert "jones2000" not in bib

    def test_entry_fields(self):
        bib = Bibliography.from_bibtex(BIBTEX)

        entry = bib.entry_for("smith2020")

        assert entry["journal"] == "Journal of Testing"
        assert entry["ENTRYTYPE"] == "article"
        assert bib.entry_for("missing") is None

    def test_empty_content(self):
        assert len(Bibliography.from_bibtex("")) == 0


class TestYearOf:
    """Tests for year extraction."""

    def test_year_field(self):
        assert Bibliography.from_bibtex(BIBTEX).year_of("smith2020") == 2020

    def test_date_field(self):
        assert Bibliography.from_bibtex(BIBTEX).year_of("lee2021") == 2021

    def test_missing(self):
        bib = Bibliography.from_bibtex(BIBTEX)

        assert bib.year_of("undated") is None
        assert bib.year_of("missing") is None

    def test_from_plain_entries(self):
        bib = Bibliography({"a": {"year": "circa 1999"}})

        assert bib.year_of("a") == 1999


class TestDescribe:
    """Tests for candidate annotations."""

    def test_multiple_authors(self):
        bib = Bibliography.from_bibtex(BIBTEX)

        assert bib.describe("smith2020") == "Smith et al. (2020) A Study of Citation Order"

    def test_single_author_without_comma(self):
        bib = Bibliography.from_bibtex(BIBTEX)

        assert bib.describe("lee2021") == "Kim Lee (2021) Reordering Things"

    def test_unknown_key(self):
        assert Bibliography().describe("missing") == ""

    def test_long_title_truncated(self):
        bib = Bibliography({"a": {"title": "x" * 80}})

        assert bib.describe("a") == "x" * 60 + "..."


class TestFromFile:
    """Tests for loading a bibliography file."""

    def test_load(self, tmp_path):
        path = tmp_path / "refs.bib"
        path.write_text(BIBTEX, encoding="utf-8")

        bib = Bibliography.from_file(path)

        assert len(bib) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(BibliographyError):
            Bibliography.from_file(tmp_path / "missing.bib")
