"""
Redis-backed index gateway.

Reads an inverted index laid out as:
- ``URLSet:<term>``: set of urls whose page contains the term
- ``TermCounter:<url>``: hash of term -> occurrence count on that page

Patterns Applied:
- Connection pooling: one redis.Redis client (with its pool) per gateway
- Pipelined HGETs: one round-trip for all counts of a term
- Transport errors mapped to LookupFailure
"""

from __future__ import annotations

from typing import Any, Final

import redis
from redis.exceptions import RedisError

from wikisearch.core.exceptions import LookupFailure
from wikisearch.core.logging import get_logger
from wikisearch.search.relevance import RelevanceMap

logger = get_logger(__name__)

URL_SET_PREFIX: Final[str] = "URLSet:"
TERM_COUNTER_PREFIX: Final[str] = "TermCounter:"


def url_set_key(term: str) -> str:
    """Redis key of the set of urls containing ``term``."""
    return URL_SET_PREFIX + term


def term_counter_key(url: str) -> str:
    """Redis key of the term -> count hash for ``url``."""
    return TERM_COUNTER_PREFIX + url


class RedisIndexGateway:
    """Looks up term counts in a Redis inverted index.

    Implements IndexGatewayProtocol.
    """

    def __init__(self, client: redis.Redis) -> None:
        """Wrap an existing client.

        Args:
            client: Redis client created with ``decode_responses=True``
        """
        self._client = client

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisIndexGateway:
        """Build a gateway from a ``redis://`` URL.

        Args:
            url: Connection URL, e.g. ``redis://localhost:6379/0``
            **kwargs: Extra options passed to ``redis.Redis.from_url``
        """
        kwargs.setdefault("decode_responses", True)
        return cls(redis.Redis.from_url(url, **kwargs))

    def lookup(self, term: str) -> RelevanceMap:
        """Return url -> count for every url containing ``term``.

        Urls are returned in sorted order so equal-relevance ties rank
        deterministically.

        Raises:
            LookupFailure: On Redis errors or non-integer counts
        """
        try:
            urls = sorted(self._client.smembers(url_set_key(term)))
            if not urls:
                logger.debug("term_lookup", term=term, hits=0)
                return RelevanceMap()

            pipe = self._client.pipeline(transaction=False)
            for url in urls:
                pipe.hget(term_counter_key(url), term)
            raw_counts = pipe.execute()
        except RedisError as e:
            logger.warning("term_lookup_failed", term=term, error=str(e))
            raise LookupFailure(f"Redis lookup failed for term {term!r}: {e}", term=term) from e

        counts = {url: self._parse_count(term, url, raw) for url, raw in zip(urls, raw_counts)}
        logger.debug("term_lookup", term=term, hits=len(counts))
        return RelevanceMap(counts)

    def term_exists(self, term: str) -> bool:
        """Whether ``term`` has been indexed at all."""
        try:
            return bool(self._client.exists(url_set_key(term)))
        except RedisError as e:
            raise LookupFailure(f"Redis lookup failed for term {term!r}: {e}", term=term) from e

    def ping(self) -> bool:
        """Return True when Redis answers PING."""
        try:
            return bool(self._client.ping())
        except RedisError as e:
            logger.warning("redis_ping_failed", error=str(e))
            return False

    def close(self) -> None:
        """Close the client connection pool."""
        self._client.close()

    @staticmethod
    def _parse_count(term: str, url: str, raw: str | bytes | None) -> int:
        # A url listed for the term without a count contributes 0
        if raw is None:
            return 0
        try:
            count = int(raw)
        except (TypeError, ValueError):
            raise LookupFailure(
                f"Malformed count {raw!r} for term {term!r} on {url}", term=term
            ) from None
        if count < 0:
            raise LookupFailure(f"Negative count {count} for term {term!r} on {url}", term=term)
        return count
