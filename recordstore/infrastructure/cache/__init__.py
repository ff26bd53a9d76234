"""Cache backends."""

from recordstore.config import Settings, get_logger
from recordstore.infrastructure.cache.memory import InMemoryCache
from recordstore.infrastructure.cache.redis_cache import RedisCache

logger = get_logger(__name__)


def build_cache(settings: Settings) -> InMemoryCache | RedisCache:
    """Create the cache backend selected in settings."""
    if settings.cache.backend == "redis":
        logger.info("Using Redis cache backend")
        return RedisCache(url=settings.cache.redis_url)
    logger.info("Using in-memory cache backend")
    return InMemoryCache()


__all__ = ["InMemoryCache", "RedisCache", "build_cache"]
