"""Orchestration: hash many files, each with its own hasher."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from content_hasher.config import Settings
from content_hasher.reader import hash_file_sized_async

logger = logging.getLogger(__name__)


@dataclass
class FileDigest:
    """Content hash result for one file."""

    path: Path
    size: int = 0
    digest: bytes | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.digest is not None

    @property
    def hexdigest(self) -> str | None:
        return self.digest.hex() if self.digest is not None else None


async def hash_single_path(settings: Settings, path: Path) -> FileDigest:
    """Hash one file; I/O failures are recorded, not raised."""
    try:
        digest, size = await hash_file_sized_async(path, settings.read_chunk_size)
    except OSError as exc:
        logger.error("Hash failed for %s: %s", path, exc)
        return FileDigest(path=path, error=str(exc))

    logger.info("File %s  content_hash=%s", path.name, digest.hex()[:12])
    return FileDigest(path=path, size=size, digest=digest)


async def hash_paths(settings: Settings, paths: list[Path]) -> list[FileDigest]:
    """Hash all *paths* concurrently, results in input order.

    Uses asyncio.gather with a semaphore to limit concurrency.
    Individual failures do not abort the batch.
    """
    if not paths:
        logger.warning("No paths given")
        return []

    semaphore = asyncio.Semaphore(settings.max_concurrent)

    async def _hash_with_limit(path: Path) -> FileDigest:
        async with semaphore:
            return await hash_single_path(settings, path)

    results = await asyncio.gather(*[_hash_with_limit(p) for p in paths])
    failed = sum(1 for r in results if not r.ok)
    if failed:
        logger.warning("%d of %d files failed", failed, len(results))
    return list(results)
