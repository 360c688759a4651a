"""Shared test fixtures for content_hasher test suite."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Callable

import pytest

from content_hasher.config import Settings
from content_hasher.hasher import BLOCK_SIZE


def _pattern(n: int) -> bytes:
    # 251 is prime, so consecutive blocks differ.
    return (bytes(range(251)) * (n // 251 + 1))[:n]


# ---------------------------------------------------------------------------
# Reference implementation built directly on hashlib
# ---------------------------------------------------------------------------

@pytest.fixture()
def reference_hash() -> Callable[[bytes], bytes]:
    """One-shot content hash: sha256 over the concatenated block digests."""

    def _reference(data: bytes) -> bytes:
        block_digests = b"".join(
            hashlib.sha256(data[i:i + BLOCK_SIZE]).digest()
            for i in range(0, len(data), BLOCK_SIZE)
        )
        return hashlib.sha256(block_digests).digest()

    return _reference


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def one_block() -> bytes:
    """Exactly BLOCK_SIZE bytes."""
    return _pattern(BLOCK_SIZE)


@pytest.fixture(scope="session")
def multi_block() -> bytes:
    """Two full blocks plus a 3-byte tail."""
    return _pattern(2 * BLOCK_SIZE + 3)


@pytest.fixture()
def sample_file(tmp_path: Path, multi_block: bytes) -> Path:
    """Write multi_block to tmp_path and return its path."""
    path = tmp_path / "sample.bin"
    path.write_bytes(multi_block)
    return path


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture()
def test_settings() -> Settings:
    """Settings with small reads so multi-read paths are exercised."""
    return Settings(read_chunk_size=1_000_003, max_concurrent=2)
