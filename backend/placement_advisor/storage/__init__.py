"""Storage module - provides interface and implementations for durable token storage."""

from .interface import TokenStorage, StorageError
from .memory_storage import MemoryStorage
from .cookie_storage import CookieStorage

__all__ = ['TokenStorage', 'StorageError', 'MemoryStorage', 'CookieStorage']
