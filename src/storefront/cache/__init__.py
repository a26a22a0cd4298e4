"""Cache selection.

The cache is optional: ``get_cache()`` returns None when caching is disabled,
and callers treat that exactly like a miss.
"""

from storefront.cache.memory_adapter import MemoryCache
from storefront.cache.port import CachePort
from storefront.utils import settings

__all__ = ["CachePort", "MemoryCache", "get_cache", "reset_cache", "set_cache"]

_UNSET = object()
_current_cache = _UNSET


def get_cache() -> CachePort | None:
    global _current_cache
    if _current_cache is _UNSET:
        _current_cache = MemoryCache() if settings.cache_enabled() else None
    return _current_cache


def set_cache(cache: CachePort | None) -> None:
    """Install a cache adapter, or None to run without one."""
    global _current_cache
    _current_cache = cache


def reset_cache() -> None:
    global _current_cache
    _current_cache = _UNSET
