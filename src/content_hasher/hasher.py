"""Block-composed SHA-256 content hash, as used for Dropbox ``content_hash``.

The stream is cut into 4 MiB blocks, each block is hashed with SHA-256,
and the concatenated raw block digests are hashed again.  Feeding the
same bytes in any chunking produces the same digest.
"""

from __future__ import annotations

import hashlib
import logging

logger = logging.getLogger(__name__)

BLOCK_SIZE = 4 * 1024 * 1024
DIGEST_SIZE = 32


class HasherFinalizedError(RuntimeError):
    """Raised when a finalized hasher is used without a reset."""


class ContentHasher:
    """Incremental content hasher with a ``hashlib``-like surface.

    ``finalize()`` consumes the instance: further ``update`` or
    ``finalize`` calls raise :class:`HasherFinalizedError` until
    :meth:`reset` is called.  Use ``copy().finalize()`` to peek at an
    intermediate digest.
    """

    name = "content_hash"
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: bytes = b"") -> None:
        self.reset()
        if data:
            self.update(data)

    def reset(self) -> None:
        """Return to the freshly constructed state."""
        self._overall = hashlib.sha256()
        self._block = hashlib.sha256()
        self._block_pos = 0
        self._blocks_flushed = 0
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def update(self, data: bytes | bytearray | memoryview) -> None:
        """Absorb *data*, splitting it at block boundaries."""
        self._check_open()
        view = memoryview(data).cast("B")
        while len(view) > 0:
            # A full block is flushed only once more input arrives.
            if self._block_pos == BLOCK_SIZE:
                self._flush_block()

            room = BLOCK_SIZE - self._block_pos
            head, view = view[:room], view[room:]
            self._block.update(head)
            self._block_pos += len(head)

    input = update

    def finalize(self) -> bytes:
        """Flush any trailing block and return the 32-byte digest."""
        self._check_open()
        if self._block_pos > 0:
            self._flush_block()
        self._finalized = True
        return self._overall.digest()

    def finalize_hex(self) -> str:
        """Like :meth:`finalize` but lowercase-hex encoded."""
        return self.finalize().hex()

    def copy(self) -> ContentHasher:
        """Return an independent clone of the running state."""
        self._check_open()
        clone = type(self).__new__(type(self))
        clone._overall = self._overall.copy()
        clone._block = self._block.copy()
        clone._block_pos = self._block_pos
        clone._blocks_flushed = self._blocks_flushed
        clone._finalized = False
        return clone

    def _flush_block(self) -> None:
        self._overall.update(self._block.digest())
        self._blocks_flushed += 1
        logger.debug("Flushed block %d (%d bytes)", self._blocks_flushed, self._block_pos)
        self._block = hashlib.sha256()
        self._block_pos = 0

    def _check_open(self) -> None:
        if self._finalized:
            raise HasherFinalizedError("Hasher already finalized; call reset() before reusing it")

    def __repr__(self) -> str:
        state = "finalized" if self._finalized else f"block_pos={self._block_pos}"
        return f"<ContentHasher blocks={self._blocks_flushed} {state}>"


def content_hash(data: bytes) -> str:
    """Return the hex content hash of an in-memory byte string."""
    return ContentHasher(data).finalize_hex()
