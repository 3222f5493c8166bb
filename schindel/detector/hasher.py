"""Seeded 32-bit hash families for min-shingle hashing.

A hash family yields one independent-looking hash function per integer seed.
Every instance follows the same absorb-then-finalize protocol so the
fingerprint engine can feed all tokens of a window before asking for a digest::

    h = Murmur3Hasher.with_seed(3)
    h.update(b"ab")
    h.update(b"c")
    h.intdigest()  # unsigned 32-bit int
"""
from __future__ import annotations

from typing import Dict, Type

import mmh3
import xxhash

from .exceptions import UnknownHasherError

SEED_MASK = 0xFFFFFFFF

# -----------------------------------------------------------
# Base class
# -----------------------------------------------------------


class SeedHasher:
    """Base class for seeded hash functions."""

    name: str = ""

    def __init__(self, seed: int = 0):
        self.seed = seed & SEED_MASK

    @classmethod
    def with_seed(cls, seed: int) -> "SeedHasher":
        """Create a fresh hasher for *seed*."""
        return cls(seed)

    def update(self, data: bytes) -> None:
        """Absorb *data* into the hash state."""
        raise NotImplementedError

    def intdigest(self) -> int:
        """Return the unsigned 32-bit digest of everything absorbed so far."""
        raise NotImplementedError


# -----------------------------------------------------------
# Implementations
# -----------------------------------------------------------


class Murmur3Hasher(SeedHasher):
    """MurmurHash3 x86_32 over the concatenation of all absorbed bytes.

    The algorithm is not incremental, so input is buffered until
    :meth:`intdigest` is called.
    """

    name = "murmur3"

    def __init__(self, seed: int = 0):
        super().__init__(seed)
        self._buf = bytearray()

    def update(self, data: bytes) -> None:
        self._buf += data

    def intdigest(self) -> int:
        return mmh3.hash(bytes(self._buf), self.seed, signed=False)


class XXHasher(SeedHasher):
    """Streaming XXH32 from the *xxhash* package."""

    name = "xxh32"

    def __init__(self, seed: int = 0):
        super().__init__(seed)
        self._state = xxhash.xxh32(seed=self.seed)

    def update(self, data: bytes) -> None:
        self._state.update(data)

    def intdigest(self) -> int:
        return self._state.intdigest()


# -----------------------------------------------------------
# Registry
# -----------------------------------------------------------

HASHERS: Dict[str, Type[SeedHasher]] = {
    Murmur3Hasher.name: Murmur3Hasher,
    XXHasher.name: XXHasher,
}

DEFAULT_HASHER = Murmur3Hasher.name


def get_hasher(name: str) -> Type[SeedHasher]:
    """Return the hash family registered under *name*."""
    try:
        return HASHERS[name]
    except KeyError:
        known = ", ".join(sorted(HASHERS))
        raise UnknownHasherError(f"unknown hasher {name!r} (expected one of: {known})") from None
