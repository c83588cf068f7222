"""
Tests for the ambient core: Settings, structlog configuration, tracing spans
and the exception hierarchy.
"""

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from wikisearch.clients import InMemoryIndexGateway
from wikisearch.core import logging as core_logging
from wikisearch.core.config import Settings, get_settings
from wikisearch.core.exceptions import (
    ConfigurationError,
    LookupFailure,
    UsageError,
    WikiSearchError,
)
from wikisearch.core.tracing import query_span
from wikisearch.search import QueryChain, chain as chain_module

# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    """Settings load from WIKISEARCH_* environment variables."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WIKISEARCH_INDEX_BACKEND", raising=False)
        monkeypatch.delenv("WIKISEARCH_LOOKUP_WORKERS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.service_name == "wikisearch"
        assert settings.index_backend == "redis"
        assert settings.lookup_workers == 1
        assert settings.default_limit is None

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WIKISEARCH_INDEX_BACKEND", "http")
        monkeypatch.setenv("WIKISEARCH_INDEX_URL", "http://index.test")
        monkeypatch.setenv("WIKISEARCH_LOOKUP_WORKERS", "4")

        settings = get_settings()

        assert settings.index_backend == "http"
        assert settings.index_url == "http://index.test"
        assert settings.lookup_workers == 4

    def test_unprefixed_env_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WIKISEARCH_INDEX_BACKEND", raising=False)
        monkeypatch.setenv("INDEX_BACKEND", "memory")

        assert Settings(_env_file=None).index_backend == "redis"


# =============================================================================
# Logging
# =============================================================================


class TestLogging:
    """configure_logging() runs once until reset."""

    @pytest.fixture(autouse=True)
    def _restore(self):
        yield
        core_logging.reset_logging()
        core_logging.configure_logging()

    def test_configure_is_idempotent(self) -> None:
        core_logging.reset_logging()
        core_logging.configure_logging(log_level="DEBUG", json_output=False)
        first = structlog.get_config()["processors"]

        core_logging.configure_logging(log_level="ERROR", json_output=True)

        assert structlog.get_config()["processors"] is first

    def test_reset_allows_reconfigure(self) -> None:
        core_logging.configure_logging()
        core_logging.reset_logging()

        assert core_logging._configured is False
        core_logging.configure_logging(json_output=False)
        assert core_logging._configured is True

    def test_service_info_processor(self) -> None:
        event = core_logging.add_service_info(None, "info", {"event": "query"})  # type: ignore[arg-type]

        assert event == {"event": "query", "service": "wikisearch"}

    def test_query_context_binds_and_restores(self) -> None:
        with core_logging.query_context("java AND coffee", "and"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["query"] == "java AND coffee"
            assert bound["operator"] == "and"

        assert "query" not in structlog.contextvars.get_contextvars()

    def test_nested_query_context(self) -> None:
        with core_logging.query_context("outer"):
            with core_logging.query_context("inner", "or"):
                assert structlog.contextvars.get_contextvars()["query"] == "inner"
            assert structlog.contextvars.get_contextvars()["query"] == "outer"

    def test_fold_logs_under_query_context(self) -> None:
        """Lookups made during a fold see the query label."""
        seen: list[dict] = []

        def resolver(term: str) -> dict[str, int]:
            seen.append(structlog.contextvars.get_contextvars())
            return {"u1": 1}

        QueryChain().fold_or(["java", "coffee"], resolver)

        assert [ctx["query"] for ctx in seen] == ["java OR coffee", "java OR coffee"]
        assert seen[0]["operator"] == "or"

    def test_get_logger_binds(self) -> None:
        logger = core_logging.get_logger(__name__)

        assert hasattr(logger, "info")


# =============================================================================
# Tracing
# =============================================================================


class TestFoldTracing:
    """Each chained fold is recorded as one span."""

    def test_fold_emits_span(self, monkeypatch: pytest.MonkeyPatch) -> None:
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        monkeypatch.setattr(chain_module, "tracer", provider.get_tracer(__name__))

        gateway = InMemoryIndexGateway({"a": {"u1": 1}, "b": {"u1": 2, "u2": 1}})
        QueryChain().fold_or(["a", "b"], gateway.lookup)

        spans = exporter.get_finished_spans()
        assert [span.name for span in spans] == ["query_chain.fold"]
        attributes = spans[0].attributes
        assert attributes["query.operator"] == "or"
        assert attributes["query.term_count"] == 2
        assert attributes["query.result_count"] == 2

    def test_query_span_prefixes_attributes(self) -> None:
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))

        with query_span(provider.get_tracer(__name__), "lookup", term="java"):
            pass

        (span,) = exporter.get_finished_spans()
        assert span.name == "lookup"
        assert span.attributes["query.term"] == "java"


# =============================================================================
# Exceptions
# =============================================================================


class TestExceptions:
    """All errors share the WikiSearchError root."""

    @pytest.mark.parametrize("exc_type", [UsageError, LookupFailure, ConfigurationError])
    def test_hierarchy(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, WikiSearchError)

    def test_lookup_failure_keeps_term(self) -> None:
        error = LookupFailure("index down", term="java")

        assert error.term == "java"
        assert str(error) == "index down"

    def test_lookup_failure_term_optional(self) -> None:
        assert LookupFailure("index down").term is None
