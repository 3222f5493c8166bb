"""schindel command-line interface.

Usage
-----
$ schindel hash essay.txt
$ schindel compare original.txt suspect.txt -n 100 -l 5
$ schindel scan corpus/ --out results --threshold 0.7 --processes 4
$ schindel run config.yml

*hash* prints the fingerprint of one file, *compare* prints the estimated
resemblance of two files, *scan* reports near-duplicate pairs across a
directory and *run* does the same from a YAML configuration file.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from .detector.config import load_config
from .detector.exceptions import SchindelError
from .detector.hasher import HASHERS
from .detector.scan import read_document, scan_corpus
from .detector.shingles import MinShingleHash, ShingleConfig
from .detector.tokens import TEXT_TOKEN_KINDS

logger = logging.getLogger("schindel")

# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def _config_from_args(args: argparse.Namespace) -> ShingleConfig:
    return ShingleConfig(
        num_hashes=args.num_hashes,
        ngram_len=args.ngram,
        hasher=args.hasher,
        token_kind=args.tokens,
    )


def _fingerprint_file(path: Path, config: ShingleConfig) -> MinShingleHash:
    return MinShingleHash.from_text(read_document(path), config)


def _print_pairs(pairs, limit: int = 20) -> None:
    for a, b, score in pairs[:limit]:
        print(f"{score:.3f}\t{a}\t{b}")
    if len(pairs) > limit:
        print(f"... {len(pairs) - limit} more")


# -----------------------------------------------------------
# Commands
# -----------------------------------------------------------


def _cmd_hash(args: argparse.Namespace) -> None:
    fp = _fingerprint_file(args.file, _config_from_args(args))
    if fp.is_empty:
        logger.warning("%s is shorter than one shingle; fingerprint is all sentinels", args.file)
    print(" ".join(str(v) for v in fp))


def _cmd_compare(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    a = _fingerprint_file(args.a, config)
    b = _fingerprint_file(args.b, config)
    if a.is_empty and b.is_empty:
        logger.warning("both inputs are shorter than one shingle; similarity carries no information")
    print(f"{a.compare(b):.4f}")


def _cmd_scan(args: argparse.Namespace) -> None:
    result = scan_corpus(
        args.data_dir,
        _config_from_args(args),
        threshold=args.threshold,
        topk=args.topk,
        out_dir=args.out,
        processes=args.processes,
        progress=not args.quiet,
    )
    print(f"{len(result.pairs)} similar pairs among {result.documents} documents")
    _print_pairs(result.pairs)


def _cmd_run(args: argparse.Namespace) -> None:
    config, settings = load_config(args.config)
    result = scan_corpus(
        settings.data_dir,
        config,
        threshold=settings.threshold,
        topk=settings.topk,
        out_dir=settings.out_dir,
        processes=settings.processes,
        progress=not args.quiet,
    )
    print(f"{len(result.pairs)} similar pairs among {result.documents} documents")
    print(f"Results written to {settings.out_dir}")


# -----------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------


def _add_shingle_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("-n", "--num-hashes", type=int, default=100,
                   help="Number of hash functions / fingerprint length (default: 100)")
    p.add_argument("-l", "--ngram", type=int, default=5,
                   help="Tokens per shingle (default: 5)")
    p.add_argument("--hasher", default="murmur3", choices=sorted(HASHERS),
                   help="Hash family (default: murmur3)")
    p.add_argument("--tokens", default="char", choices=sorted(TEXT_TOKEN_KINDS),
                   help="How text is split into tokens (default: char)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schindel",
        description="Min-shingle fingerprints for near-duplicate detection",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output")
    sub = parser.add_subparsers(required=True, dest="cmd")

    p_hash = sub.add_parser("hash", help="Print the fingerprint of a file")
    p_hash.add_argument("file", type=Path)
    _add_shingle_options(p_hash)
    p_hash.set_defaults(func=_cmd_hash)

    p_compare = sub.add_parser("compare", help="Estimate resemblance of two files")
    p_compare.add_argument("a", type=Path)
    p_compare.add_argument("b", type=Path)
    _add_shingle_options(p_compare)
    p_compare.set_defaults(func=_cmd_compare)

    p_scan = sub.add_parser("scan", help="Find near-duplicate files in a directory")
    p_scan.add_argument("data_dir", type=Path)
    p_scan.add_argument("--out", type=Path, default=None,
                        help="Write samples.jsonl and speed.txt to this directory")
    p_scan.add_argument("--threshold", type=float, default=0.8,
                        help="Minimum similarity to report (default: 0.8)")
    p_scan.add_argument("--topk", type=int, default=5000,
                        help="Maximum number of pairs kept (default: 5000)")
    p_scan.add_argument("--processes", type=int, default=1,
                        help="Worker processes for fingerprinting (default: 1)")
    _add_shingle_options(p_scan)
    p_scan.set_defaults(func=_cmd_scan)

    p_run = sub.add_parser("run", help="Run a scan described by a YAML configuration file")
    p_run.add_argument("config", type=Path, help="Path to YAML configuration file")
    p_run.set_defaults(func=_cmd_run)

    return parser


def main(argv: List[str] | None = None) -> int:  # noqa: D401 – simple
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO if not args.quiet else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except (SchindelError, FileNotFoundError) as exc:
        print(f"schindel: error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
