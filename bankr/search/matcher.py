"""Scored abbreviation matching over normalized query tokens."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from bankr.search.normalizer import QueryToken
from bankr.search.registry import RegistrySnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of abbreviation matching for one query."""

    abbreviation: str | None
    free_text: tuple[str, ...]
    consumed: tuple[str, ...] = ()
    scores: dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def matched(self) -> bool:
        return self.abbreviation is not None


class AbbreviationMatcher:
    """Identify at most one bank abbreviation in a query.

    Every matchable token adds 1 to each abbreviation it prefix-matches or
    whose bank name contains it (once per abbreviation, even when it matches
    both ways). A single abbreviation with the top score wins and the tokens
    that scored for it leave the free-text set. A tie at the top score is
    ambiguous and reports no abbreviation.
    """

    def __init__(self, registry: RegistrySnapshot):
        self.registry = registry

    def candidates(self, token: str) -> frozenset[str]:
        return self.registry.prefix_matches(token) | self.registry.substring_matches(token)

    def match(self, tokens: Sequence[QueryToken]) -> MatchResult:
        scores: Counter[str] = Counter()
        contributors: dict[str, set[int]] = {}

        for position, token in enumerate(tokens):
            if not token.matchable:
                continue
            for abbreviation in self.candidates(token.text):
                scores[abbreviation] += 1
                contributors.setdefault(abbreviation, set()).add(position)

        all_text = tuple(t.text for t in tokens)
        if not scores:
            return MatchResult(abbreviation=None, free_text=all_text)

        top_score = max(scores.values())
        leaders = sorted(abb for abb, score in scores.items() if score == top_score)
        if len(leaders) > 1:
            logger.debug("Ambiguous abbreviation match %s at score %d", leaders, top_score)
            return MatchResult(abbreviation=None, free_text=all_text, scores=dict(scores))

        winner = leaders[0]
        consumed_positions = contributors[winner]
        return MatchResult(
            abbreviation=winner,
            free_text=tuple(
                t.text for i, t in enumerate(tokens) if i not in consumed_positions
            ),
            consumed=tuple(tokens[i].text for i in sorted(consumed_positions)),
            scores=dict(scores),
        )
