"""Wrapper around datasketch.MinHashLSH for min-shingle fingerprints."""
from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from datasketch import MinHashLSH

from .exceptions import ConfigMismatchError, InvalidConfigError
from .shingles import MinShingleHash, ShingleConfig

logger = logging.getLogger(__name__)


class ShingleIndex:
    """Shortlists near-duplicate candidates, then verifies them with ``compare``."""

    def __init__(self, config: ShingleConfig, *, threshold: float = 0.8) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise InvalidConfigError(f"threshold must be in [0, 1], got {threshold}")
        if config.num_hashes < 2:
            raise InvalidConfigError(
                f"LSH indexing needs at least 2 hash functions, got {config.num_hashes}"
            )
        try:
            self.lsh = MinHashLSH(threshold=threshold, num_perm=config.num_hashes)
        except ValueError as exc:
            # No band/row split of num_hashes fits the threshold.
            raise InvalidConfigError(
                f"cannot index {config.num_hashes} hashes at threshold {threshold}: {exc}"
            ) from exc
        self.config = config
        self.threshold = threshold
        self._stored: Dict[str, MinShingleHash] = {}

    def _check(self, fp: MinShingleHash) -> None:
        if fp.config != self.config:
            raise ConfigMismatchError(f"index expects {self.config}, got {fp.config}")

    # --------------------------------------------------
    # Mutation
    # --------------------------------------------------

    def add(self, key: str, fp: MinShingleHash) -> None:
        """Add *fp* under *key* to the index."""
        self._check(fp)
        if key in self._stored:
            raise ValueError(f"key {key!r} already indexed")
        self.lsh.insert(key, fp.to_minhash())
        self._stored[key] = fp

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def get_candidates(self, fp: MinShingleHash) -> List[str]:
        """Return candidate duplicate keys for *fp* using LSH."""
        self._check(fp)
        return list(self.lsh.query(fp.to_minhash()))

    def query(self, fp: MinShingleHash) -> List[Tuple[str, float]]:
        """Return ``(key, score)`` pairs scoring at least ``threshold``, best first."""
        verified = []
        for key in self.get_candidates(fp):
            score = fp.compare(self._stored[key])
            if score >= self.threshold:
                verified.append((key, score))
        verified.sort(key=lambda kv: (-kv[1], kv[0]))
        logger.debug("%d verified matches", len(verified))
        return verified

    def get_fingerprint(self, key: str) -> MinShingleHash:
        return self._stored[key]

    def __contains__(self, key: object) -> bool:
        return key in self._stored

    def __len__(self) -> int:
        return len(self._stored)
