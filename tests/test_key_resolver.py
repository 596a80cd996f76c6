"""Tests for fuzzy key suggestions."""

from rapidfuzz import fuzz

from citeshift.services.key_resolver import rank_keys, suggest_keys


class TestSuggestKeys:
    """Tests for suggest_keys."""

    def test_closest_first(self):
        """Test that a dropped letter beats a changed digit."""
        result = suggest_keys("smith2020", {"smith2021", "smit2020", "jones2020"})

        assert result[0] == "smit2020"
        assert result[-1] == "jones2020"
        assert len(result) == 3

    def test_empty_pool(self):
        assert suggest_keys("smith2020", set()) == []

    def test_valid_key_still_ranked(self):
        """Test that an existing key is returned, not filtered out."""
        result = suggest_keys("smith2020", {"smith2020", "smith2021"})

        assert result == ["smith2020", "smith2021"]

    def test_custom_scorer(self):
        """Test plugging in another rapidfuzz scorer."""
        result = suggest_keys("2020smith", {"smith2020", "other"}, scorer=fuzz.token_sort_ratio)

        assert result[0] == "smith2020"


class TestRankKeys:
    """Tests for rank_keys."""

    def test_scores_descending(self):
        ranked = rank_keys("doe2019", ["doe2018", "doe2019", "roe2010"])

        assert ranked[0].key == "doe2019"
        assert ranked[0].score == 100
        scores = [s.score for s in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_ties_alphabetical(self):
        ranked = rank_keys("ab", ["zb", "ac", "xb"])

        # every candidate differs by one letter
        assert [s.key for s in ranked] == ["ac", "xb", "zb"]

    def test_score_cutoff(self):
        ranked = rank_keys("smith2020", ["smith2021", "zzzzz"], score_cutoff=50)

        assert [s.key for s in ranked] == ["smith2021"]

    def test_duplicate_candidates_collapsed(self):
        ranked = rank_keys("a1", ["a1", "a1", "b1"])

        assert [s.key for s in ranked] == ["a1", "b1"]
