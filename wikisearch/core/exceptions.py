"""
wikisearch - Custom Exceptions

Patterns Applied:
- Custom namespaced exceptions rooted at WikiSearchError
- Usage errors kept apart from lookup failures so callers can recover from
  the former by re-issuing a corrected request

Anti-Patterns Avoided:
- Exception shadowing: LookupFailure instead of builtins like ConnectionError
  or LookupError
"""


class WikiSearchError(Exception):
    """Base exception for wikisearch.

    All custom exceptions inherit from this base class.
    """
    pass


class UsageError(WikiSearchError):
    """Raised when a query request is malformed.

    Examples: a chained query with fewer than two terms, a result limit
    below one, a non-integer limit, an unknown operator label.
    """
    pass


class LookupFailure(WikiSearchError):
    """Raised when the index gateway cannot answer a term lookup.

    Covers an unreachable backing store as well as malformed data coming
    back from it. The failing term is kept for reporting.
    """

    def __init__(self, message: str, term: str | None = None) -> None:
        super().__init__(message)
        self.term = term


class ConfigurationError(WikiSearchError):
    """Raised when configuration is invalid or missing."""
    pass
