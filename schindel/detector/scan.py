"""Near-duplicate scan over a directory of text files.

Each file is one document. Files are fingerprinted (optionally in parallel),
indexed with MinHash LSH and every candidate pair is verified with
:meth:`MinShingleHash.compare`. The best ``topk`` pairs are written to
``samples.jsonl`` and throughput to ``speed.txt`` in the output directory.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .lsh_index import ShingleIndex
from .shingles import MinShingleHash, ShingleConfig, build_many
from .exceptions import InvalidConfigError
from .tokens import TEXT_TOKEN_KINDS, tokenize

logger = logging.getLogger(__name__)

# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def read_document(path: Path | str) -> str:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    return path.read_text(encoding="utf-8", errors="ignore")


def _tokens_for(path: Path, config: ShingleConfig) -> list:
    return list(tokenize(read_document(path), config.token_kind))


def compare_texts(a: str, b: str, config: Optional[ShingleConfig] = None) -> float:
    """Similarity of two raw texts under *config* (default N=100, L=5 characters)."""
    config = config or ShingleConfig()
    return MinShingleHash.from_text(a, config).compare(MinShingleHash.from_text(b, config))


@dataclass
class ScanResult:
    documents: int
    tokens: int
    seconds: float
    pairs: List[Tuple[str, str, float]] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def throughput(self) -> float:
        return self.tokens / max(self.seconds, 1e-9)


# -----------------------------------------------------------
# Core
# -----------------------------------------------------------


def scan_corpus(
    data_dir: Path,
    config: ShingleConfig,
    *,
    threshold: float = 0.8,
    topk: int = 5000,
    out_dir: Optional[Path] = None,
    processes: int = 1,
    progress: bool = False,
) -> ScanResult:
    """Find near-duplicate file pairs under *data_dir*.

    Pairs are reported as ``(earlier, later, score)`` in file-name order.
    Files too short to form a single shingle are skipped, since their
    all-sentinel fingerprints would match each other.
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise FileNotFoundError(data_dir)

    if config.token_kind not in TEXT_TOKEN_KINDS:
        raise InvalidConfigError(f"token kind {config.token_kind!r} cannot be read from text files")
    index = ShingleIndex(config, threshold=threshold)

    t0 = time.time()
    files = sorted(p for p in data_dir.glob("**/*") if p.is_file())
    keys = [str(p.relative_to(data_dir)) for p in files]
    docs = [_tokens_for(p, config) for p in files]
    total_tokens = sum(len(d) for d in docs)
    logger.info("fingerprinting %d files (%s)", len(files), config)

    fingerprints = build_many(docs, config, processes=processes, progress=progress)

    pairs: List[Tuple[str, str, float]] = []
    skipped: List[str] = []
    for key, fp in zip(keys, fingerprints):
        if fp.is_empty:
            logger.warning("skipping %s: fewer than %d tokens", key, config.ngram_len)
            skipped.append(key)
            continue
        pairs.extend((other, key, score) for other, score in index.query(fp))
        index.add(key, fp)

    pairs.sort(key=lambda p: (-p[2], p[0], p[1]))
    del pairs[topk:]
    elapsed = time.time() - t0

    result = ScanResult(
        documents=len(files), tokens=total_tokens, seconds=elapsed, pairs=pairs, skipped=skipped
    )
    if out_dir is not None:
        write_results(result, Path(out_dir))

    logger.info(
        "processed %s tokens from %d files in %.2fs (%.0f tok/s), %d pairs >= %.2f",
        f"{total_tokens:,}", len(files), elapsed, result.throughput, len(pairs), threshold,
    )
    return result


def write_results(result: ScanResult, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    with (out_dir / "samples.jsonl").open("w", encoding="utf-8") as f:
        for a, b, score in result.pairs:
            json.dump({"a": a, "b": b, "score": score}, f)
            f.write("\n")

    (out_dir / "speed.txt").write_text(
        "tokens_processed\tseconds\tthroughput_tokens_per_s\n"
        f"{result.tokens}\t{result.seconds:.2f}\t{result.throughput:.2f}\n"
    )
