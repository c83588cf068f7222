"""wikisearch: boolean query algebra over a term -> (url, relevance) index.

Per-term results fetched from an inverted index are combined with
OR (union), AND (intersection) and MINUS (difference), relevance scores are
summed across matched terms, and the combined result is ranked.

The index itself lives behind a narrow gateway (Redis or HTTP); this package
only reads it.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
