"""Decode token ids back into text."""

from typing import Iterable

from .byte_level import decode_symbols
from .types import TokenId
from .vocabulary import Vocabulary


class Decoder:
    """Turns ids into text by reversing the vocabulary and the byte-level codec."""

    def __init__(self, vocab: Vocabulary) -> None:
        self.vocab = vocab

    def decode(self, ids: Iterable[TokenId], errors: str = "replace") -> str:
        """
        Decode a sequence of ids into text.

        :param ids: Token ids to decode.
        :param errors: How to handle invalid UTF-8, "strict" or "replace".
            Ids produced by encoding a string always decode cleanly; invalid
            sequences only come from hand-picked ids such as half of a
            multi-byte character.
        :raises UnknownIdError: If any id is not in the vocabulary.
        """
        # id stream -> symbol stream -> byte stream
        symbols = "".join(self.vocab.token_of(tok_id) for tok_id in ids)
        return decode_symbols(symbols).decode("utf-8", errors=errors)
