"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hasher.py
CRC-32 (IEEE polynomial, as in zlib/ZIP) helpers used to fingerprint file content.

- crc32_of_prefix: checksum of at most the first PARTIAL_CHUNK_SIZE bytes of a stream
- crc32_of_stream: checksum of a whole stream, read in FULL_BLOCK_SIZE blocks

Both return the checksum together with the number of bytes consumed, so callers
can record the content size as a side effect.
"""
import zlib
from typing import BinaryIO, Tuple

PARTIAL_CHUNK_SIZE = 64 * 1024
FULL_BLOCK_SIZE = 100 * 1024


class Crc32AlgorithmImpl:
    """Incremental CRC-32 over byte chunks."""

    @staticmethod
    def hash(data: bytes, value: int = 0) -> int:
        return zlib.crc32(data, value) & 0xFFFFFFFF


def crc32_of_prefix(stream: BinaryIO, limit: int = PARTIAL_CHUNK_SIZE) -> Tuple[int, int]:
    """
    Computes the CRC-32 of at most `limit` leading bytes of `stream`.

    A single read may return fewer bytes than requested (decompressing
    streams do), so reading continues until `limit` bytes or EOF.

    Returns:
        Tuple of (checksum, bytes_read)
    """
    crc = 0
    remaining = limit
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        crc = Crc32AlgorithmImpl.hash(chunk, crc)
        remaining -= len(chunk)
    return crc, limit - remaining


def crc32_of_stream(stream: BinaryIO, block_size: int = FULL_BLOCK_SIZE) -> Tuple[int, int]:
    """
    Computes the CRC-32 of everything left in `stream`.

    Returns:
        Tuple of (checksum, bytes_read)
    """
    crc = 0
    total = 0
    while True:
        block = stream.read(block_size)
        if not block:
            break
        crc = Crc32AlgorithmImpl.hash(block, crc)
        total += len(block)
    return crc, total
