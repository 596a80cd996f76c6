"""Tests for sorting references by year."""

from citeshift.models.schemas import Reference
from citeshift.services.sorter import sort_by_year_descending


def keys(refs):
    return [r.key for r in refs]


class TestSortByYearDescending:
    """Tests for sort_by_year_descending."""

    def test_newest_first(self):
        """Test the basic ordering by year."""
        years = {"smith2020": 2020, "doe2019": 2019, "lee2021": 2021}
        refs = [Reference(key="smith2020"), Reference(key="doe2019"), Reference(key="lee2021")]

        result = sort_by_year_descending(refs, years.get)

        assert keys(result) == ["lee2021", "smith2020", "doe2019"]

    def test_stable_for_equal_years(self):
        """Test that references from the same year keep their order."""
        years = {"b": 2020, "a": 2020, "c": 2021, "d": 2020}
        refs = [Reference(key=k) for k in ["b", "a", "c", "d"]]

        result = sort_by_year_descending(refs, years.get)

        assert keys(result) == ["c", "b", "a", "d"]

    def test_missing_year_sorts_last(self):
        """Test that unknown keys go after dated ones."""
        years = {"old": 1990}
        refs = [Reference(key="unknown"), Reference(key="old")]

        result = sort_by_year_descending(refs, years.get)

        assert keys(result) == ["old", "unknown"]

    def test_unparseable_year_uses_default(self):
        years = {"nd": "n.d.", "dated": "2001"}
        refs = [Reference(key="nd"), Reference(key="dated")]

        result = sort_by_year_descending(refs, years.get)

        assert keys(result) == ["dated", "nd"]

    def test_custom_default(self):
        """Test placing undated references first with a high default."""
        years = {"dated": 2001}
        refs = [Reference(key="dated"), Reference(key="undated")]

        result = sort_by_year_descending(refs, years.get, default=9999)

        assert keys(result) == ["undated", "dated"]

    def test_input_not_modified(self):
        years = {"a": 1, "b": 2}
        refs = [Reference(key="a"), Reference(key="b")]

        sort_by_year_descending(refs, years.get)

        assert keys(refs) == ["a", "b"]
