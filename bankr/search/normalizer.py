"""Query normalization: lowercasing, noise-word removal and short-token merging."""

from __future__ import annotations

from dataclasses import dataclass

# Words dropped from queries before anything else looks at them
EXCLUDED_WORDS = frozenset({"of", "bank", "and", "limited", "ltd"})

# Tokens shorter than this are merged with their successor and never
# matched against the abbreviation registry
MIN_TOKEN_LENGTH = 3


@dataclass(frozen=True)
class QueryToken:
    """A lowercase query token.

    ``merged`` tokens were built by joining a short token to the one after
    it ("jp" + "nagar"); they are searched as-is but never matched against
    abbreviations.
    """

    text: str
    merged: bool = False

    @property
    def matchable(self) -> bool:
        """Whether the token may be matched against the abbreviation registry."""
        return not self.merged and len(self.text) >= MIN_TOKEN_LENGTH

    def __str__(self) -> str:
        return self.text


def is_excluded_word(word: str) -> bool:
    return word.lower() in EXCLUDED_WORDS


def tokenize(query: str) -> list[str]:
    """Split on whitespace, lowercase, and drop excluded words."""
    return [w.lower() for w in query.split() if not is_excluded_word(w)]


def merge_short_tokens(words: list[str]) -> list[QueryToken]:
    """Join each short token to the token that follows it.

    Single lookahead, left to right, no chaining: "a b c" becomes
    ["ab", "c"]. A short token with nothing after it is kept as-is.
    """
    tokens: list[QueryToken] = []
    i = 0
    while i < len(words):
        word = words[i]
        if len(word) < MIN_TOKEN_LENGTH and i + 1 < len(words):
            tokens.append(QueryToken(word + words[i + 1], merged=True))
            i += 2
        else:
            tokens.append(QueryToken(word))
            i += 1
    return tokens


def normalize_query(query: str) -> list[QueryToken]:
    """Turn a raw query into ordered search tokens.

    >>> [t.text for t in normalize_query("Bank of India JP Nagar")]
    ['india', 'jpnagar']
    """
    return merge_short_tokens(tokenize(query))
