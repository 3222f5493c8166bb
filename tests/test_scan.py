"""Corpus scan, LSH index and YAML config tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from schindel.detector.config import load_config, parse_config
from schindel.detector.exceptions import ConfigMismatchError, InvalidConfigError
from schindel.detector.lsh_index import ShingleIndex
from schindel.detector.scan import compare_texts, scan_corpus
from schindel.detector.shingles import MinShingleHash, ShingleConfig

from test_core import ORIGINAL, OTHER

CFG = ShingleConfig(num_hashes=100, ngram_len=5)
EDITED = ORIGINAL.replace("finally", "at last")


def test_compare_texts() -> None:
    assert compare_texts(ORIGINAL, ORIGINAL) == 1.0
    assert compare_texts(ORIGINAL, EDITED, CFG) > compare_texts(ORIGINAL, OTHER, CFG)


def test_index_query_verifies_candidates() -> None:
    index = ShingleIndex(CFG, threshold=0.5)
    index.add("original", MinShingleHash(ORIGINAL, CFG))
    index.add("other", MinShingleHash(OTHER, CFG))
    assert len(index) == 2 and "original" in index

    matches = index.query(MinShingleHash(EDITED, CFG))
    assert [key for key, _ in matches] == ["original"]
    assert 0.5 <= matches[0][1] <= 1.0
    assert index.get_fingerprint("other") == MinShingleHash(OTHER, CFG)


def test_index_rejects_bad_input() -> None:
    index = ShingleIndex(CFG)
    index.add("a", MinShingleHash(ORIGINAL, CFG))
    with pytest.raises(ValueError):
        index.add("a", MinShingleHash(OTHER, CFG))
    with pytest.raises(ConfigMismatchError):
        index.add("b", MinShingleHash(OTHER, ShingleConfig(num_hashes=100, ngram_len=4)))
    with pytest.raises(ValueError):
        ShingleIndex(CFG, threshold=1.5)


def test_scan_finds_near_duplicates(tmp_path: Path) -> None:
    data = tmp_path / "corpus"
    (data / "sub").mkdir(parents=True)
    (data / "a.txt").write_text(ORIGINAL, encoding="utf-8")
    (data / "sub" / "b.txt").write_text(EDITED, encoding="utf-8")
    (data / "c.txt").write_text(OTHER, encoding="utf-8")
    (data / "d.txt").write_text("hi", encoding="utf-8")
    (data / "e.txt").write_text("", encoding="utf-8")

    result = scan_corpus(data, CFG, threshold=0.5, out_dir=tmp_path / "out")

    assert result.documents == 5
    assert sorted(result.skipped) == ["d.txt", "e.txt"]
    assert [(a, b) for a, b, _ in result.pairs] == [("a.txt", str(Path("sub") / "b.txt"))]
    assert (tmp_path / "out" / "samples.jsonl").exists()
    assert result.throughput > 0


def test_scan_topk(tmp_path: Path) -> None:
    for i in range(4):
        (tmp_path / f"copy{i}.txt").write_text(ORIGINAL, encoding="utf-8")
    result = scan_corpus(tmp_path, CFG, threshold=0.9, topk=2)
    assert len(result.pairs) == 2
    assert all(score == 1.0 for _, _, score in result.pairs)


def test_scan_missing_dir(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        scan_corpus(tmp_path / "nope", CFG)


def test_load_config(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yml"
    cfg_path.write_text("data_dir: corpus\nnum_hashes: 50\nngram: 4\ntoken_kind: word\nprocesses: 2\n")
    shingle_cfg, settings = load_config(cfg_path)
    assert shingle_cfg == ShingleConfig(num_hashes=50, ngram_len=4, token_kind="word")
    assert settings.data_dir == (tmp_path / "corpus").resolve()
    assert settings.out_dir == (tmp_path / "results").resolve()
    assert settings.threshold == 0.8 and settings.topk == 5000 and settings.processes == 2


@pytest.mark.parametrize(
    "cfg",
    [{}, {"data_dir": "x", "ngram": 0}, {"data_dir": "x", "threshold": "high"}, ["data_dir"]],
)
def test_parse_config_errors(cfg) -> None:
    with pytest.raises(InvalidConfigError):
        parse_config(cfg)


def test_installed_datasketch_is_in_supported_range() -> None:
    from importlib.metadata import version

    assert int(version("datasketch").split(".")[0]) < 2
    index = ShingleIndex(ShingleConfig(num_hashes=32, ngram_len=4), threshold=0.5)
    fp = MinShingleHash("hello world", index.config)
    index.add("hello", fp)
    assert index.query(fp) == [("hello", 1.0)]


@pytest.mark.parametrize(
    "num_hashes, threshold",
    [(1, 0.8), (100, 1.0), (100, -0.1)],
)
def test_index_rejects_unusable_lsh_settings(num_hashes: int, threshold: float) -> None:
    with pytest.raises(InvalidConfigError):
        ShingleIndex(ShingleConfig(num_hashes=num_hashes, ngram_len=5), threshold=threshold)


def test_scan_rejects_settings_before_fingerprinting(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "a.txt").write_text(ORIGINAL, encoding="utf-8")

    def _fail(*args, **kwargs):
        raise AssertionError("documents were fingerprinted")

    monkeypatch.setattr("schindel.detector.scan.build_many", _fail)
    with pytest.raises(InvalidConfigError):
        scan_corpus(tmp_path, CFG, threshold=1.0)


def test_scan_rejects_int_tokens(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigError):
        scan_corpus(tmp_path, ShingleConfig(token_kind="int"))


def test_parse_config_rejects_int_tokens() -> None:
    with pytest.raises(InvalidConfigError, match="token_kind"):
        parse_config({"data_dir": "x", "token_kind": "int"})


def test_load_config_malformed_yaml(tmp_path: Path) -> None:
    cfg_path = tmp_path / "bad.yml"
    cfg_path.write_text("data_dir: [unclosed\n  ngram: : 4\n")
    with pytest.raises(InvalidConfigError, match="cannot parse"):
        load_config(cfg_path)
