"""schindel detector package.

Core public API lives here so external users can::

    from schindel.detector import MinShingleHash, ShingleConfig
    cfg = ShingleConfig(num_hashes=100, ngram_len=5)
    MinShingleHash("some text", cfg).compare(MinShingleHash("some test", cfg))
"""

from importlib.metadata import version as _pkg_version, PackageNotFoundError

try:
    __version__: str = _pkg_version("schindel")
except PackageNotFoundError:  # pragma: no cover – local dev path
    __version__ = "0.1.0"

from .exceptions import (
    SchindelError,
    InvalidConfigError,
    ConfigMismatchError,
    UnknownHasherError,
    TokenEncodingError,
)
from .hasher import SeedHasher, Murmur3Hasher, XXHasher, HASHERS, get_hasher
from .tokens import TokenCodec, CODECS, get_codec, tokenize
from .shingles import MAX_HASH, ShingleConfig, MinShingleHash, build_many, window_count
from .lsh_index import ShingleIndex
from .scan import ScanResult, scan_corpus, compare_texts

__all__ = [
    "__version__",
    "MAX_HASH",
    "ShingleConfig",
    "MinShingleHash",
    "build_many",
    "window_count",
    "SeedHasher",
    "Murmur3Hasher",
    "XXHasher",
    "HASHERS",
    "get_hasher",
    "TokenCodec",
    "CODECS",
    "get_codec",
    "tokenize",
    "ShingleIndex",
    "ScanResult",
    "scan_corpus",
    "compare_texts",
    "SchindelError",
    "InvalidConfigError",
    "ConfigMismatchError",
    "UnknownHasherError",
    "TokenEncodingError",
]
