"""Unit tests for boolean query construction."""

import pytest

from bankr.core.exceptions import QueryValidationError
from bankr.search.matcher import AbbreviationMatcher
from bankr.search.normalizer import normalize_query
from bankr.search.query_builder import build_query


class TestBuildQuery:
    """Tests for the query structure sent to the engine."""

    def test_free_text_and_abbreviation(self):
        query = build_query(["koramangala"], "HDFC")
        assert query.to_dict() == {
            "bool": {
                "must": [
                    {
                        "bool": {
                            "should": [
                                {"term": {"all_text": "koramangala"}},
                                {"term": {"all_codes": "koramangala"}},
                            ],
                            "minimum_should_match": 1,
                        }
                    },
                    {"term": {"abbreviation": "HDFC"}},
                ]
            }
        }

    def test_free_text_only(self):
        must = build_query(["jpnagar", "india"]).to_dict()["bool"]["must"]
        assert len(must) == 1
        should = must[0]["bool"]["should"]
        assert {"term": {"all_text": "jpnagar"}} in should
        assert {"term": {"all_text": "india"}} in should
        assert len(should) == 4

    def test_abbreviation_only(self):
        assert build_query([], "SBI").to_dict() == {
            "bool": {"must": [{"term": {"abbreviation": "SBI"}}]}
        }

    def test_custom_fields(self):
        should = build_query(["sbin0001234"], fields=("IFSC",)).to_dict()["bool"]["must"][0]
        assert should["bool"]["should"] == [{"term": {"IFSC": "sbin0001234"}}]

    def test_nothing_to_search(self):
        with pytest.raises(QueryValidationError, match="no searchable terms"):
            build_query([], None)


def test_pipeline_hdfc_koramangala(registry):
    """Raw query through normalize and match into the final query."""
    match = AbbreviationMatcher(registry).match(normalize_query("HDFC Koramangala"))
    query = build_query(match.free_text, match.abbreviation).to_dict()

    must = query["bool"]["must"]
    assert must[1] == {"term": {"abbreviation": "HDFC"}}
    assert must[0]["bool"]["should"][0] == {"term": {"all_text": "koramangala"}}
