"""
Serialization and compression utilities for caching.

Uses orjson for high-performance JSON serialization/deserialization.
"""

from base64 import b64decode, b64encode
from binascii import Error as BinasciiError
from gzip import BadGzipFile
from gzip import compress as gzip_compress
from gzip import decompress as gzip_decompress
from logging import getLogger
from typing import Any
from zlib import error as ZlibError  # noqa: N812

from orjson import OPT_NON_STR_KEYS, JSONDecodeError
from orjson import dumps as orjson_dumps
from orjson import loads as orjson_loads
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from portal_cache.configs import file_logger
from portal_cache.errors import (
    CacheCompressionError,
    CacheDecompressionError,
    CacheDeserializationError,
    CacheSerializationError,
)

logger = file_logger(getLogger(__name__))

COMPRESSION_MARKER = "\x00GZIP\x00"


def _default(value: object) -> object:
    """Fallback encoder for types orjson does not handle natively."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, set | frozenset):
        return sorted(value, key=str)
    return str(value)


def serialize(value: object) -> str:
    """
    Serialize value to JSON string.

    Args:
        value: Value to serialize.

    Returns:
        JSON serialized string.

    Raises:
        CacheSerializationError: If serialization fails.
    """
    try:
        return orjson_dumps(value, default=_default, option=OPT_NON_STR_KEYS).decode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.exception("Serialization failed")
        raise CacheSerializationError from e


def deserialize(value: str | bytes) -> Any:  # noqa: ANN401
    """
    Deserialize JSON string to value.

    Args:
        value: JSON string to deserialize.

    Returns:
        Deserialized value.

    Raises:
        CacheDeserializationError: If deserialization fails.
    """
    try:
        return orjson_loads(value)
    except (JSONDecodeError, TypeError) as e:
        logger.warning("Deserialization failed: %s", e)
        raise CacheDeserializationError from e


def compress(data: str) -> str:
    """
    Compress data using gzip.

    Args:
        data: Data to compress.

    Returns:
        Compressed data as base64-encoded string with marker.

    Raises:
        CacheCompressionError: If compression fails.
    """
    try:
        compressed = gzip_compress(data.encode("utf-8"))
        return COMPRESSION_MARKER + b64encode(compressed).decode("utf-8")
    except (UnicodeError, ZlibError, OSError) as e:
        logger.exception("Compression failed")
        raise CacheCompressionError from e


def decompress(data: str) -> str:
    """
    Decompress gzip data.

    Plain (uncompressed) values are returned unchanged.

    Args:
        data: Compressed base64-encoded data with marker.

    Returns:
        Decompressed string.

    Raises:
        CacheDecompressionError: If decompression fails.
    """
    if not data.startswith(COMPRESSION_MARKER):
        return data
    try:
        compressed = b64decode(data[len(COMPRESSION_MARKER) :].encode("utf-8"))
        return gzip_decompress(compressed).decode("utf-8")
    except (BinasciiError, BadGzipFile, ZlibError, UnicodeError, EOFError) as e:
        logger.warning("Decompression failed: %s", e)
        raise CacheDecompressionError from e


def do_compress(data: str, threshold: int) -> bool:
    """
    Determine if data should be compressed.

    Args:
        data: Data to check.
        threshold: Size threshold in bytes.

    Returns:
        True if data size exceeds threshold.
    """
    return len(data.encode("utf-8")) > threshold
