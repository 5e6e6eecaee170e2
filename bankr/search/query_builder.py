"""Structured boolean query construction."""

from __future__ import annotations

from typing import Sequence

from elasticsearch.dsl import Q
from elasticsearch.dsl.query import Query

from bankr.core.exceptions import QueryValidationError
from bankr.search.analysis import ABBREVIATION_FIELD, ALL_CODES_FIELD, ALL_TEXT_FIELD

DEFAULT_SEARCH_FIELDS = (ALL_TEXT_FIELD, ALL_CODES_FIELD)


def build_query(
    free_text: Sequence[str],
    abbreviation: str | None = None,
    fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
) -> Query:
    """Combine free-text terms and an optional abbreviation into one query.

    Free-text tokens become a disjunction of term queries (one per token and
    search field) of which at least one must match. The abbreviation becomes
    a term query on the ``abbreviation`` field. Both parts present are
    AND-ed together.

    Raises:
        QueryValidationError: If there is neither free text nor an
            abbreviation to search for.
    """
    must: list[Query] = []

    if free_text:
        should = [Q("term", **{f: token}) for token in free_text for f in fields]
        must.append(Q("bool", should=should, minimum_should_match=1))

    if abbreviation:
        must.append(Q("term", **{ABBREVIATION_FIELD: abbreviation}))

    if not must:
        raise QueryValidationError("Search query has no searchable terms")

    return Q("bool", must=must)
