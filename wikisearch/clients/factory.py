"""Build the configured index gateway."""

from wikisearch.clients import IndexGatewayProtocol, InMemoryIndexGateway
from wikisearch.clients.http_index import HttpIndexGateway
from wikisearch.clients.redis_index import RedisIndexGateway
from wikisearch.core.config import Settings
from wikisearch.core.exceptions import ConfigurationError

BACKENDS = ("redis", "http", "memory")


def build_gateway(settings: Settings) -> IndexGatewayProtocol:
    """Create the gateway named by ``settings.index_backend``.

    Raises:
        ConfigurationError: If the backend is unknown
    """
    backend = settings.index_backend.strip().lower()
    if backend == "redis":
        return RedisIndexGateway.from_url(settings.redis_url)
    if backend == "http":
        return HttpIndexGateway(
            base_url=settings.index_url,
            timeout=settings.index_timeout,
            max_retries=settings.index_max_retries,
            retry_delay=settings.index_retry_delay,
        )
    if backend == "memory":
        return InMemoryIndexGateway()
    raise ConfigurationError(
        f"Unknown index backend {settings.index_backend!r}; expected one of: {', '.join(BACKENDS)}"
    )
