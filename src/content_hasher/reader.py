"""Streaming helpers that feed a byte source into a ContentHasher."""

from __future__ import annotations

import asyncio
import errno
import logging
from pathlib import Path
from typing import BinaryIO

from content_hasher.hasher import BLOCK_SIZE, ContentHasher

logger = logging.getLogger(__name__)


def read_stream(reader: BinaryIO, chunk_size: int = BLOCK_SIZE) -> tuple[bytes, int]:
    """Hash everything *reader* yields; return ``(digest, bytes_hashed)``.

    Only an empty ``read()`` result ends the stream.  A ``None`` result
    (non-blocking source with nothing ready) raises ``BlockingIOError``
    rather than finalizing a partly read stream.  Errors raised by the
    reader propagate unchanged and no partial digest is produced.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    hasher = ContentHasher()
    nbytes = 0
    while True:
        chunk = reader.read(chunk_size)
        if chunk is None:
            raise BlockingIOError(errno.EAGAIN, "read() returned no data before end of stream")
        if not chunk:
            break
        hasher.update(chunk)
        nbytes += len(chunk)
    return hasher.finalize(), nbytes


def hash_reader(reader: BinaryIO, chunk_size: int = BLOCK_SIZE) -> bytes:
    """Return the raw content hash of everything *reader* yields."""
    digest, _ = read_stream(reader, chunk_size)
    return digest


def hash_file_sized(path: Path | str, chunk_size: int = BLOCK_SIZE) -> tuple[bytes, int]:
    """Return ``(digest, bytes_hashed)`` for the file at *path*."""
    path = Path(path)
    with open(path, "rb") as f:
        digest, nbytes = read_stream(f, chunk_size)
    logger.debug("Hashed %s (%d bytes)  content_hash=%s", path, nbytes, digest.hex()[:12])
    return digest, nbytes


def hash_file(path: Path | str, chunk_size: int = BLOCK_SIZE) -> bytes:
    """Return the raw content hash of the file at *path*."""
    digest, _ = hash_file_sized(path, chunk_size)
    return digest


def to_hex(digest: bytes) -> str:
    """Lowercase hex form of a raw digest (the public ``content_hash``)."""
    return digest.hex()


# Async wrappers for use in the pipeline

async def hash_reader_async(reader: BinaryIO, chunk_size: int = BLOCK_SIZE) -> bytes:
    return await asyncio.to_thread(hash_reader, reader, chunk_size)


async def hash_file_async(path: Path | str, chunk_size: int = BLOCK_SIZE) -> bytes:
    return await asyncio.to_thread(hash_file, path, chunk_size)


async def hash_file_sized_async(path: Path | str, chunk_size: int = BLOCK_SIZE) -> tuple[bytes, int]:
    return await asyncio.to_thread(hash_file_sized, path, chunk_size)
