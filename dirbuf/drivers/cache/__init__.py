"""Entry cache drivers."""

from dirbuf.drivers.cache.memory import MemoryEntryCache

__all__ = ["MemoryEntryCache"]
