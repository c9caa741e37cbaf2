"""
Byte-level codec: a fixed bijection between raw bytes and printable symbols.

Every byte value 0..255 is given a visible unicode character so that any
UTF-8 byte sequence can be handled as a plain string during BPE. Bytes that
already render as themselves (printable ASCII and most of Latin-1) keep their
own code point; the 68 remaining bytes (control characters, space, DEL, NBSP
and soft hyphen) are shifted to ``chr(256 + n)`` in ascending byte order.
This is the table used by GPT-2, so byte 32 (space) becomes ``Ġ`` and
byte 10 (newline) becomes ``Ċ``.
"""

from types import MappingProxyType
from typing import Final, Mapping

from .errors import UnknownTokenError
from .types import Symbol


def _bytes_to_unicode() -> dict[int, Symbol]:
    """Build the canonical GPT-2 byte -> symbol table."""
    keep = (
        list(range(ord("!"), ord("~") + 1))
        + list(range(ord("¡"), ord("¬") + 1))
        + list(range(ord("®"), ord("ÿ") + 1))
    )
    table: dict[int, Symbol] = {}
    n = 0
    for b in range(256):
        if b in keep:
            table[b] = chr(b)
        else:
            # shift "ugly" bytes above the latin-1 range to avoid collisions
            table[b] = chr(256 + n)
            n += 1
    return table


BYTE_TO_SYMBOL: Final[Mapping[int, Symbol]] = MappingProxyType(_bytes_to_unicode())
SYMBOL_TO_BYTE: Final[Mapping[Symbol, int]] = MappingProxyType(
    {sym: b for b, sym in BYTE_TO_SYMBOL.items()}
)


def encode_byte(b: int) -> Symbol:
    """Return the symbol for byte value ``b``."""
    if not 0 <= b <= 255:
        raise ValueError(f"byte value out of range: {b}")
    return BYTE_TO_SYMBOL[b]


def decode_symbol(s: Symbol) -> int:
    """Return the byte value represented by symbol ``s``."""
    try:
        return SYMBOL_TO_BYTE[s]
    except KeyError:
        raise UnknownTokenError("not a byte-level symbol", invalid_tok=s) from None


def encode_bytes(data: bytes) -> str:
    """Render a byte string as a string of symbols, one per byte."""
    return "".join(BYTE_TO_SYMBOL[b] for b in data)


def decode_symbols(symbols: str) -> bytes:
    """Recover the raw bytes behind a string of symbols."""
    return bytes(decode_symbol(s) for s in symbols)


__all__ = [
    "BYTE_TO_SYMBOL",
    "SYMBOL_TO_BYTE",
    "encode_byte",
    "decode_symbol",
    "encode_bytes",
    "decode_symbols",
]
