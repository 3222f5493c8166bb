"""YAML configuration for corpus scans.

Example ``config.yml``::

    data_dir: corpus/
    out: results
    num_hashes: 100
    ngram: 5
    hasher: murmur3
    token_kind: char
    threshold: 0.8
    topk: 5000
    processes: 4
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml  # type: ignore

from .exceptions import InvalidConfigError
from .shingles import ShingleConfig
from .tokens import TEXT_TOKEN_KINDS


@dataclass(frozen=True)
class ScanSettings:
    data_dir: Path
    out_dir: Path = Path("results")
    threshold: float = 0.8
    topk: int = 5000
    processes: int = 1


def parse_config(cfg: Dict[str, Any], base_dir: Path = Path(".")) -> Tuple[ShingleConfig, ScanSettings]:
    """Build configuration objects from an already-parsed mapping.

    Relative paths are resolved against *base_dir*.
    """
    if not isinstance(cfg, dict):
        raise InvalidConfigError("configuration must be a mapping")
    if "data_dir" not in cfg:
        raise InvalidConfigError("configuration is missing required key 'data_dir'")

    try:
        shingle_cfg = ShingleConfig(
            num_hashes=int(cfg.get("num_hashes", 100)),
            ngram_len=int(cfg.get("ngram", 5)),
            hasher=str(cfg.get("hasher", "murmur3")),
            token_kind=str(cfg.get("token_kind", "char")),
        )
        settings = ScanSettings(
            data_dir=(base_dir / Path(cfg["data_dir"]).expanduser()).resolve(),
            out_dir=(base_dir / Path(cfg.get("out", "results")).expanduser()).resolve(),
            threshold=float(cfg.get("threshold", 0.8)),
            topk=int(cfg.get("topk", 5000)),
            processes=int(cfg.get("processes", 1)),
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, InvalidConfigError):
            raise
        raise InvalidConfigError(f"invalid configuration value: {exc}") from exc
    if shingle_cfg.token_kind not in TEXT_TOKEN_KINDS:
        known = ", ".join(sorted(TEXT_TOKEN_KINDS))
        raise InvalidConfigError(
            f"token_kind {shingle_cfg.token_kind!r} cannot be read from text (expected one of: {known})"
        )
    return shingle_cfg, settings


def load_config(path: Path | str) -> Tuple[ShingleConfig, ScanSettings]:
    """Load a YAML scan configuration from *path*."""
    cfg_path = Path(path).resolve()
    with cfg_path.open() as f:
        try:
            cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise InvalidConfigError(f"cannot parse {cfg_path}: {exc}") from exc
    return parse_config(cfg, base_dir=cfg_path.parent)
