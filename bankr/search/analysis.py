"""
Analyzer profiles and the branch index mapping.

The same analyzer names are used when documents are indexed and when terms
are looked up, so this module is the single place they are defined.

Profiles:
    standard  name, branch, address, city, district, state
    code      IFSC and abbreviation
    phonetic  optional, never bound to a field (needs analysis-phonetic)
"""

from elasticsearch.dsl import (
    Index,
    Keyword,
    Mapping,
    Text,
    analyzer,
    char_filter,
    normalizer,
    token_filter,
)

STANDARD_PROFILE = "standard_analyzer"
CODE_PROFILE = "code_analyzer"
PHONETIC_PROFILE = "phonetic_analyzer"

# Catch-all fields targeted by free-text term queries
ALL_TEXT_FIELD = "all_text"
ALL_CODES_FIELD = "all_codes"
ABBREVIATION_FIELD = "abbreviation"

TEXT_FIELDS = ("name", "branch", "address", "city", "district", "state")
CODE_FIELDS = ("IFSC", "MICR")

# Words excluded from every text field on top of the English stop list
INDEX_EXCLUDED_WORDS = ("bank",)

# ================================
# Character filters
# ================================

non_alphabet_filter = char_filter(
    "nonalphabet_filter",
    type="pattern_replace",
    pattern="[^A-Za-z ]",
    replacement="",
)

non_alphanumeric_filter = char_filter(
    "nonalphanumeric_filter",
    type="pattern_replace",
    pattern="[^A-Za-z0-9 ]",
    replacement="",
)

# ================================
# Token filters
# ================================

english_stop_filter = token_filter(
    "english_stop",
    type="stop",
    stopwords="_english_",
)

exclude_words_filter = token_filter(
    "excludewords",
    type="stop",
    stopwords=list(INDEX_EXCLUDED_WORDS),
)

# "jp nagar" -> ["jp", "jpnagar", "nagar"]; gaps left by stop words are not filled
shingle_filter = token_filter(
    "shingle_filter",
    type="shingle",
    min_shingle_size=2,
    max_shingle_size=3,
    token_separator="",
    filler_token="",
    output_unigrams=True,
)

EDGE_NGRAM_MIN = 3
EDGE_NGRAM_MAX = 15

# "koramangala" -> ["kor", "kora", ..., "koramangala"]
edgengram_filter = token_filter(
    "edgengram_filter",
    type="edge_ngram",
    min_gram=EDGE_NGRAM_MIN,
    max_gram=EDGE_NGRAM_MAX,
)

min_length_filter = token_filter(
    "minlength",
    type="length",
    min=5,
    max=100,
)

double_metaphone_filter = token_filter(
    "double_metaphone",
    type="phonetic",
    encoder="double_metaphone",
    replace=False,
)

# ================================
# Analyzers
# ================================

standard_analyzer = analyzer(
    STANDARD_PROFILE,
    char_filter=[non_alphabet_filter],
    tokenizer="whitespace",
    filter=[
        "lowercase",
        english_stop_filter,
        exclude_words_filter,
        shingle_filter,
        edgengram_filter,
    ],
)

code_analyzer = analyzer(
    CODE_PROFILE,
    char_filter=[non_alphanumeric_filter],
    tokenizer="whitespace",
    filter=[
        "lowercase",
        shingle_filter,
        edgengram_filter,
    ],
)

phonetic_analyzer = analyzer(
    PHONETIC_PROFILE,
    char_filter=[non_alphabet_filter],
    tokenizer="whitespace",
    filter=[
        "lowercase",
        english_stop_filter,
        min_length_filter,
        exclude_words_filter,
        double_metaphone_filter,
    ],
)

# Exact, case-insensitive lookups on keyword fields (also applied to term queries)
lowercase_normalizer = normalizer(
    "lowercase_normalizer",
    filter=["lowercase"],
)


def build_mapping() -> Mapping:
    """Field mapping for branch documents."""
    m = Mapping()

    for field_name in TEXT_FIELDS:
        extra = {"fields": {"keyword": Keyword()}} if field_name == "name" else {}
        m.field(
            field_name,
            Text(analyzer=standard_analyzer, copy_to=ALL_TEXT_FIELD, **extra),
        )

    m.field(
        "IFSC",
        Text(
            analyzer=code_analyzer,
            copy_to=ALL_CODES_FIELD,
            fields={"keyword": Keyword(normalizer=lowercase_normalizer)},
        ),
    )
    m.field("MICR", Keyword(copy_to=ALL_CODES_FIELD))
    m.field("contact", Keyword(index=False))
    m.field(
        ABBREVIATION_FIELD,
        Keyword(
            normalizer=lowercase_normalizer,
            fields={"ngram": Text(analyzer=code_analyzer)},
        ),
    )

    m.field(ALL_TEXT_FIELD, Text(analyzer=standard_analyzer))
    m.field(ALL_CODES_FIELD, Text(analyzer=code_analyzer))

    return m


def build_index(name: str, *, phonetic: bool = False) -> Index:
    """Index definition (settings, analyzers, mapping) for the branch index.

    Args:
        name: Index name.
        phonetic: Also register the phonetic analyzer. Requires the
            ``analysis-phonetic`` plugin on the cluster.
    """
    index = Index(name)
    index.settings(
        number_of_shards=1,
        number_of_replicas=0,
        max_ngram_diff=EDGE_NGRAM_MAX - EDGE_NGRAM_MIN,
    )
    index.mapping(build_mapping())
    if phonetic:
        index.analyzer(phonetic_analyzer)
    return index
