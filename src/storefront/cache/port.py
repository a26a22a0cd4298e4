"""Cache port: a key/value store with per-entry expiry."""

from abc import ABC, abstractmethod
from typing import Any


class CachePort(ABC):
    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...
