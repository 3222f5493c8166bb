"""Parallel vs single-process equivalence tests."""
from __future__ import annotations

import json
import random
import tempfile
from pathlib import Path

import pytest

from schindel.detector.scan import scan_corpus
from schindel.detector.shingles import MinShingleHash, ShingleConfig, build_many

CFG = ShingleConfig(num_hashes=32, ngram_len=3, token_kind="word")


def _corpus(rng: random.Random, n_docs: int = 12) -> list[list[str]]:
    vocab = [f"tok{i}" for i in range(200)]
    docs = []
    for i in range(n_docs):
        doc = rng.choices(vocab, k=60)
        if docs and i % 4 == 0:
            doc = list(docs[-1])  # every 4th doc duplicates the previous one
        docs.append(doc)
    return docs


@pytest.mark.parametrize("processes", [1, 2])
def test_build_many_matches_serial(processes: int) -> None:
    docs = _corpus(random.Random(42))
    expected = [MinShingleHash(doc, CFG) for doc in docs]
    assert build_many(docs, CFG, processes=processes) == expected


def test_build_many_empty() -> None:
    assert build_many([], CFG) == []


@pytest.mark.parametrize("processes", [1, 2])
def test_scan_parallel_equivalence(processes: int) -> None:
    """Run scan with *processes* and compare outputs to a single-process run."""
    rng = random.Random(7)
    with tempfile.TemporaryDirectory() as tmpdir:
        corpus_dir = Path(tmpdir) / "corpus"
        corpus_dir.mkdir()
        for i, doc in enumerate(_corpus(rng)):
            (corpus_dir / f"file_{i:02d}.txt").write_text(" ".join(doc), encoding="utf-8")

        out_single = Path(tmpdir) / "out_single"
        out_multi = Path(tmpdir) / f"out_multi_{processes}"
        scan_corpus(corpus_dir, CFG, threshold=0.8, topk=100, out_dir=out_single, processes=1)
        scan_corpus(corpus_dir, CFG, threshold=0.8, topk=100, out_dir=out_multi, processes=processes)

        def _load_pairs(p: Path):
            with (p / "samples.jsonl").open() as f:
                return [(rec["a"], rec["b"], rec["score"]) for rec in map(json.loads, f)]

        single = _load_pairs(out_single)
        assert single == _load_pairs(out_multi)
        # Exact copies are always found.
        assert ("file_03.txt", "file_04.txt", 1.0) in single
        assert (out_single / "speed.txt").read_text().startswith("tokens_processed\t")
