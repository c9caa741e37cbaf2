"""GPT-2 style pre-tokenization into byte-level symbol chunks."""

import logging
from typing import Iterable

import regex as re

from .byte_level import BYTE_TO_SYMBOL
from .pattern import TokenPattern, compile_pattern
from .types import Token

log = logging.getLogger(__name__)


class PreTokenizer:
    """
    Split text into word-like chunks before BPE.

    Chunks never overlap and, joined together, give back the input exactly.
    No prefix space is added to the first chunk.

    Example:
       >>> PreTokenizer().split("I'm happy!")
       ['I', "'m", ' happy', '!']
    """

    def __init__(self, pattern: str | None = None) -> None:
        """Initialize with a provided or the default GPT-2 split pattern."""
        self.pat: str = TokenPattern.GPT2.value if pattern is None else pattern
        self.compiled_pat: re.Pattern[str] = compile_pattern(self.pat)

    def split(self, text: str) -> list[str]:
        """Split text into chunks using the configured pattern."""
        return [m.group(0) for m in self.compiled_pat.finditer(text)]

    def split_with_specials(
        self, text: str, special_tokens: Iterable[str]
    ) -> list[tuple[str, bool]]:
        """
        Split text while keeping special tokens as whole chunks.

        Special tokens are found left to right; where several start at the same
        position the longest one wins. Text between them is split with the
        regular pattern.

        :param text: Text to split.
        :param special_tokens: Special token strings to match atomically.
        :returns: ``(chunk, is_special)`` pairs in input order.
        """
        # longest first so regex alternation prefers it at a shared position
        specials = sorted({seq for seq in special_tokens if seq}, key=len, reverse=True)
        if not specials:
            return [(chunk, False) for chunk in self.split(text)]

        # escape regex metachars like "|" in special tokens
        special_pat = re.compile("|".join(re.escape(seq) for seq in specials))

        out: list[tuple[str, bool]] = []
        pos = 0
        for m in special_pat.finditer(text):
            if m.start() > pos:
                out.extend((chunk, False) for chunk in self.split(text[pos : m.start()]))
            out.append((m.group(0), True))
            pos = m.end()
        if pos < len(text):
            out.extend((chunk, False) for chunk in self.split(text[pos:]))
        log.debug(f"split {len(out)} chunks around {len(specials)} special tokens")
        return out

    @staticmethod
    def to_symbols(chunk: str) -> list[Token]:
        """Render a chunk as one single-symbol token per UTF-8 byte."""
        return [BYTE_TO_SYMBOL[b] for b in chunk.encode("utf-8")]

    def pre_tokenize(self, text: str) -> list[list[Token]]:
        """Split text and render every chunk as byte-level symbol tokens."""
        return [self.to_symbols(chunk) for chunk in self.split(text)]
