"""Token codecs and reference tokenizers.

A *codec* turns one token into the canonical bytes absorbed by a
:class:`~schindel.detector.hasher.SeedHasher`. Tokenizers are plain helpers
used by the CLI; library callers are free to produce tokens any way they like.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, Iterator, List, NamedTuple

from .exceptions import TokenEncodingError

# -----------------------------------------------------------
# Codecs
# -----------------------------------------------------------

_WORD_TERMINATOR = b"\xff"
_U64_MAX = (1 << 64) - 1


class TokenCodec(NamedTuple):
    """Encoder for one token kind plus the kind's default (padding) value."""

    name: str
    encode: Callable[[Any], bytes]
    default: Any


def _encode_char(token: Any) -> bytes:
    if not isinstance(token, str) or len(token) != 1:
        raise TokenEncodingError(f"char token must be a 1-character str, got {token!r}")
    return ord(token).to_bytes(4, "little")


def _encode_word(token: Any) -> bytes:
    if not isinstance(token, str):
        raise TokenEncodingError(f"word token must be str, got {type(token).__name__}")
    # Terminator keeps ("ab", "c") and ("a", "bc") apart.
    return token.encode("utf-8") + _WORD_TERMINATOR


def _encode_byte(token: Any) -> bytes:
    if isinstance(token, bool) or not isinstance(token, int) or not 0 <= token <= 0xFF:
        raise TokenEncodingError(f"byte token must be an int in 0..255, got {token!r}")
    return bytes((token,))


def _encode_int(token: Any) -> bytes:
    if isinstance(token, bool) or not isinstance(token, int) or not 0 <= token <= _U64_MAX:
        raise TokenEncodingError(f"int token must be an unsigned 64-bit int, got {token!r}")
    return token.to_bytes(8, "little")


CODECS: Dict[str, TokenCodec] = {
    "char": TokenCodec("char", _encode_char, "\0"),
    "word": TokenCodec("word", _encode_word, ""),
    "byte": TokenCodec("byte", _encode_byte, 0),
    "int": TokenCodec("int", _encode_int, 0),
}

DEFAULT_TOKEN_KIND = "char"


def get_codec(kind: str) -> TokenCodec:
    try:
        return CODECS[kind]
    except KeyError:
        known = ", ".join(sorted(CODECS))
        raise TokenEncodingError(f"unknown token kind {kind!r} (expected one of: {known})") from None


# -----------------------------------------------------------
# Tokenisation helpers
# -----------------------------------------------------------

_WHITESPACE_RE = re.compile(r"\s+")


def chars(text: str) -> Iterator[str]:
    """Yield *text* one character at a time."""
    return iter(text)


def words(text: str) -> List[str]:
    """Split *text* into whitespace-separated tokens."""
    if text is None or not isinstance(text, str):
        text = ""
    return [tok for tok in _WHITESPACE_RE.split(text.strip()) if tok]


def utf8_bytes(text: str) -> bytes:
    """UTF-8 encode *text*; iterating the result yields ``byte`` tokens."""
    return text.encode("utf-8")


_TOKENIZERS: Dict[str, Callable[[str], Iterable[Any]]] = {
    "char": chars,
    "word": words,
    "byte": utf8_bytes,
}

# Token kinds that raw text can be split into.
TEXT_TOKEN_KINDS = frozenset(_TOKENIZERS)


def tokenize(text: str, kind: str = DEFAULT_TOKEN_KIND) -> Iterable[Any]:
    """Tokenise raw *text* into tokens suitable for codec *kind*."""
    try:
        return _TOKENIZERS[kind](text)
    except KeyError:
        raise TokenEncodingError(f"no text tokenizer for token kind {kind!r}") from None
