"""Unit tests for abbreviation matching."""

from bankr.search.matcher import AbbreviationMatcher
from bankr.search.normalizer import QueryToken, normalize_query
from bankr.search.registry import RegistrySnapshot


class TestAbbreviationMatcher:
    """Tests for scored, tie-conservative matching."""

    def match(self, registry, query):
        return AbbreviationMatcher(registry).match(normalize_query(query))

    def test_unique_winner_consumes_its_tokens(self, registry):
        result = self.match(registry, "sbi main branch")
        assert result.abbreviation == "SBI"
        assert result.free_text == ("main", "branch")
        assert result.consumed == ("sbi",)

    def test_abbreviation_and_name_match_counted_once(self, registry):
        result = self.match(registry, "hdfc koramangala")
        assert result.abbreviation == "HDFC"
        assert result.scores["HDFC"] == 1
        assert result.free_text == ("koramangala",)

    def test_tie_reports_no_abbreviation(self, registry):
        # "state" appears in both State Bank names
        result = self.match(registry, "state bank")
        assert result.abbreviation is None
        assert result.free_text == ("state",)
        assert result.scores == {"SBI": 1, "SBT": 1}

    def test_trailing_short_token_ignored(self, registry):
        # "sb" would prefix-match SBI and SBT but is too short to be considered
        result = self.match(registry, "koramangala sb")
        assert result.abbreviation is None
        assert result.free_text == ("koramangala", "sb")

    def test_higher_score_breaks_tie(self, registry):
        result = self.match(registry, "state travancore statue")
        assert result.abbreviation == "SBT"
        assert result.free_text == ("statue",)
        assert set(result.consumed) == {"state", "travancore"}

    def test_merged_tokens_never_match(self, registry):
        # "jpnagar" is a merged token and "india" ties between SBI and BKID
        result = self.match(registry, "Bank of India JP Nagar")
        assert result.abbreviation is None
        assert result.free_text == ("india", "jpnagar")

    def test_short_tokens_never_match(self):
        registry = RegistrySnapshot.from_entries([])
        matcher = AbbreviationMatcher(registry)
        result = matcher.match([QueryToken("sb")])
        assert not result.matched

    def test_no_candidates_keeps_everything(self, registry):
        result = self.match(registry, "koramangala bangalore")
        assert result.abbreviation is None
        assert result.free_text == ("koramangala", "bangalore")
        assert result.scores == {}

    def test_empty_query(self, registry):
        result = AbbreviationMatcher(registry).match([])
        assert result.abbreviation is None
        assert result.free_text == ()

    def test_free_text_preserves_order(self, registry):
        result = self.match(registry, "koramangala hdfc bangalore")
        assert result.free_text == ("koramangala", "bangalore")

    def test_candidates_union(self, registry):
        matcher = AbbreviationMatcher(registry)
        assert matcher.candidates("icic") == {"ICIC"}
        assert matcher.candidates("india") == {"SBI", "BKID"}
