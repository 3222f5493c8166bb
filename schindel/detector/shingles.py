"""Min-shingle hashing.

A document is viewed as the set of its *shingles*: contiguous runs of ``L``
tokens. For ``to be or not to be`` the word 2-gram shingles are
``(to, be)``, ``(be, or)``, ``(or, not)``, ``(not, to)`` with ``(to, be)``
counted once. Resemblance of two documents is the Jaccard coefficient of
their shingle sets.

Storing the sets is too expensive for long inputs, so each shingle is hashed
with ``N`` seeded hash functions and only the running minimum per seed is
kept. The probability that two documents share the minimum for a given seed
equals their Jaccard resemblance, so the fraction of matching positions in
two fingerprints estimates it in ``O(N)`` memory.

Example::

    from schindel.detector.shingles import MinShingleHash, ShingleConfig

    cfg = ShingleConfig(num_hashes=100, ngram_len=5)
    a = MinShingleHash(original_text, cfg)
    b = MinShingleHash(suspect_text, cfg)
    a.compare(b)  # ~ fraction of 5-character shingles in common
"""
from __future__ import annotations

import logging
import multiprocessing
from collections import deque
from dataclasses import dataclass
from itertools import islice
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Type

import numpy as np
from datasketch import MinHash
from tqdm import tqdm

from .exceptions import ConfigMismatchError, InvalidConfigError
from .hasher import DEFAULT_HASHER, SeedHasher, get_hasher
from .tokens import CODECS, DEFAULT_TOKEN_KIND, get_codec, tokenize

logger = logging.getLogger(__name__)

# Sentinel for "no shingle observed"
MAX_HASH: int = 0xFFFFFFFF

# -----------------------------------------------------------
# Configuration
# -----------------------------------------------------------


@dataclass(frozen=True)
class ShingleConfig:
    """Parameters shared by every fingerprint that may be compared.

    Attributes:
        num_hashes: Number of seeded hash functions (fingerprint length, N).
        ngram_len: Tokens per shingle (L).
        hasher: Name of the registered hash family.
        token_kind: Name of the token codec.
    """

    num_hashes: int = 100
    ngram_len: int = 5
    hasher: str = DEFAULT_HASHER
    token_kind: str = DEFAULT_TOKEN_KIND

    def __post_init__(self) -> None:
        if not isinstance(self.num_hashes, int) or self.num_hashes < 1:
            raise InvalidConfigError(f"num_hashes must be a positive int, got {self.num_hashes!r}")
        if not isinstance(self.ngram_len, int) or self.ngram_len < 1:
            raise InvalidConfigError(f"ngram_len must be a positive int, got {self.ngram_len!r}")
        if self.token_kind not in CODECS:
            raise InvalidConfigError(f"unknown token kind {self.token_kind!r}")
        get_hasher(self.hasher)


def window_count(length: int, ngram_len: int) -> int:
    """Number of shingles formed from *length* tokens."""
    return max(0, length - ngram_len + 1)


# -----------------------------------------------------------
# Construction
# -----------------------------------------------------------


def _digest(hasher: Type[SeedHasher], seed: int, window: Iterable[bytes]) -> int:
    h = hasher.with_seed(seed)
    for part in window:
        h.update(part)
    return h.intdigest()


def _min_shingles(tokens: Iterable[Any], config: ShingleConfig) -> np.ndarray:
    """Fold every shingle of *tokens* into per-seed running minima."""
    hasher = get_hasher(config.hasher)
    codec = get_codec(config.token_kind)
    n, length = config.num_hashes, config.ngram_len

    minima = np.full(n, MAX_HASH, dtype=np.uint32)
    # Ring of encoded tokens; appending evicts the oldest, advancing the window.
    pad = codec.encode(codec.default)
    window = deque([pad] * length, maxlen=length)

    stream = iter(tokens)
    for token in islice(stream, length - 1):
        window.append(codec.encode(token))

    shingles = 0
    for token in stream:
        window.append(codec.encode(token))
        digests = np.fromiter(
            (_digest(hasher, seed, window) for seed in range(n)), dtype=np.uint32, count=n
        )
        np.minimum(minima, digests, out=minima)
        shingles += 1

    logger.debug("folded %d shingles into %d minima", shingles, n)
    return minima


class MinShingleHash:
    """Immutable min-shingle fingerprint of a token sequence.

    Built once from *tokens*; there is no way to extend it afterwards.
    Fingerprints built from fewer than ``ngram_len`` tokens hold only
    :data:`MAX_HASH` values. Two such fingerprints compare as 1.0, which
    means "nothing observed" rather than "identical content"; see
    :attr:`is_empty`.
    """

    __slots__ = ("_config", "_hash")

    def __init__(self, tokens: Iterable[Any], config: Optional[ShingleConfig] = None):
        self._config = config or ShingleConfig()
        self._hash = _freeze(_min_shingles(tokens, self._config))

    @classmethod
    def from_text(cls, text: str, config: Optional[ShingleConfig] = None) -> "MinShingleHash":
        """Fingerprint raw *text* with the tokenizer matching ``config.token_kind``."""
        config = config or ShingleConfig()
        return cls(tokenize(text, config.token_kind), config)

    @classmethod
    def _from_values(cls, values: Sequence[int], config: ShingleConfig) -> "MinShingleHash":
        obj = cls.__new__(cls)
        obj._config = config
        obj._hash = _freeze(np.array(values, dtype=np.uint32))
        return obj

    # --------------------------------------------------
    # Accessors
    # --------------------------------------------------

    @property
    def config(self) -> ShingleConfig:
        return self._config

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(self._hash.tolist())

    @property
    def is_empty(self) -> bool:
        """*True* when no shingle was formed (input shorter than ``ngram_len``)."""
        return bool(np.all(self._hash == MAX_HASH))

    def __iter__(self) -> Iterator[int]:
        return iter(self._hash.tolist())

    def __len__(self) -> int:
        return len(self._hash)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MinShingleHash):
            return NotImplemented
        return self._config == other._config and bool(np.array_equal(self._hash, other._hash))

    def __hash__(self) -> int:
        return hash((self._config, self._hash.tobytes()))

    def __repr__(self) -> str:
        return f"MinShingleHash({self._hash.tolist()!r}, config={self._config!r})"

    def __str__(self) -> str:
        return str(self._hash.tolist())

    # --------------------------------------------------
    # Similarity
    # --------------------------------------------------

    def compare(self, other: "MinShingleHash") -> float:
        """Estimate Jaccard resemblance as the fraction of equal minima."""
        if self._config != other._config:
            raise ConfigMismatchError(
                f"cannot compare fingerprints built with {self._config} and {other._config}"
            )
        matches = int(np.count_nonzero(self._hash == other._hash))
        return matches / len(self._hash)

    def to_minhash(self):
        """Return a ``datasketch.MinHash`` carrying the same values (for LSH indexing)."""
        return MinHash(num_perm=len(self._hash), hashvalues=self._hash.astype(np.uint64))


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


# -----------------------------------------------------------
# Batch construction
# -----------------------------------------------------------


def _build_values(job: Tuple[Iterable[Any], ShingleConfig]) -> List[int]:
    tokens, config = job
    return _min_shingles(tokens, config).tolist()


def build_many(
    documents: Iterable[Iterable[Any]],
    config: Optional[ShingleConfig] = None,
    *,
    processes: int = 1,
    progress: bool = False,
) -> List[MinShingleHash]:
    """Fingerprint every token sequence in *documents*, preserving order.

    With ``processes > 1`` documents are spread over a process pool; each
    fingerprint is still built sequentially by one worker. Documents must
    then be picklable (strings, lists, bytes).
    """
    config = config or ShingleConfig()
    jobs = ((doc, config) for doc in documents)

    if processes <= 1:
        results: Iterable[List[int]] = map(_build_values, jobs)
        if progress:
            results = tqdm(results, desc="Fingerprints")
        return [MinShingleHash._from_values(v, config) for v in results]

    logger.info("building fingerprints with %d processes", processes)
    with multiprocessing.Pool(processes=processes) as pool:
        results = pool.imap(_build_values, jobs, chunksize=4)
        if progress:
            results = tqdm(results, desc="Fingerprints")
        return [MinShingleHash._from_values(v, config) for v in results]
