"""
Utility helpers.

Kept import-free so that errors and configs can depend on it without cycles;
import the serializer from ``portal_cache.utils.cache_serializer`` directly.
"""
