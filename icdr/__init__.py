"""Building blocks of a compressed inverted index: bit codes, posting lists, lexicon, BM25 traversal."""

__version__ = "0.1.0"

__all__ = [
    "bitvector",
    "heap",
    "params",
    "postings",
    "word",
    "lexicon",
    "iterator",
    "entity",
]