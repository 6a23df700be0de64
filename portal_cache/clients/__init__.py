from portal_cache.clients.memory_client import MemoryClient
from portal_cache.clients.protocols import KeyValueStore
from portal_cache.clients.redis_client import RedisClient

__all__ = ["KeyValueStore", "MemoryClient", "RedisClient"]
