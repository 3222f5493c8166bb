"""schindel - min-shingle hashing for near-duplicate detection.

A min-shingle hash is a fixed-size fingerprint of a token sequence that
estimates the Jaccard resemblance of two documents' n-gram sets without
storing them.

Quick Start:
    # CLI usage
    schindel compare original.txt suspect.txt

    # Python API
    from schindel import MinShingleHash, ShingleConfig
    cfg = ShingleConfig(num_hashes=100, ngram_len=5)
    MinShingleHash(original, cfg).compare(MinShingleHash(suspect, cfg))
"""

from .detector import __version__, MAX_HASH

# Re-export main API
from .detector import (
    ShingleConfig,
    MinShingleHash,
    build_many,
    window_count,
    Murmur3Hasher,
    XXHasher,
    ShingleIndex,
    scan_corpus,
    compare_texts,
    ConfigMismatchError,
)

__all__ = [
    "__version__",
    "MAX_HASH",
    "ShingleConfig",
    "MinShingleHash",
    "build_many",
    "window_count",
    "Murmur3Hasher",
    "XXHasher",
    "ShingleIndex",
    "scan_corpus",
    "compare_texts",
    "ConfigMismatchError",
]
