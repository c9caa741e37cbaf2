"""
Bidirectional token <-> id mapping with frequency bookkeeping.
"""

import logging
from collections import Counter
from typing import Iterable

from ._bpe import MergeRule
from .byte_level import BYTE_TO_SYMBOL, encode_bytes
from .errors import SpecialTokenError, UnknownIdError, UnknownTokenError
from .types import Token, TokenId

log = logging.getLogger(__name__)


class Vocabulary:
    """
    Registry of every token a tokenizer knows about.

    Ids are handed out in registration order: the 256 byte symbols first (so
    the id of a byte symbol equals its byte value), then special tokens in
    the order they are added, then merged tokens in rank order.

    Special tokens are kept apart from ordinary tokens: they are looked up by
    their raw text and never compete with a merged token that happens to
    spell the same bytes.
    """

    def __init__(self) -> None:
        """Initialize a vocabulary holding only the 256 byte symbols."""
        self._token_to_id: dict[Token, TokenId] = {}
        # ids are dense, so a list is enough for the reverse direction
        self._id_to_token: list[Token] = []
        self._special_toks: dict[str, TokenId] = {}
        self._freqs: Counter[Token] = Counter()
        self._frozen: bool = False

        for b in range(256):
            self.id_of(BYTE_TO_SYMBOL[b])

    @classmethod
    def build(
        cls, merges: Iterable[MergeRule], special_toks: Iterable[str] = ()
    ) -> "Vocabulary":
        """
        Build a vocabulary from special tokens and merge rules.

        Merge rules are registered in rank order so ids come out the same as
        they would for a freshly trained tokenizer with the same specials.
        """
        vocab = cls()
        for seq in special_toks:
            vocab.add_special_token(seq)
        for rule in sorted(merges, key=lambda r: r.rank):
            vocab.id_of(rule.merged)

        log.debug(f"built vocabulary with {len(vocab)} tokens")
        return vocab

    def __len__(self) -> int:
        return len(self._id_to_token)

    def __contains__(self, token: object) -> bool:
        return token in self._token_to_id

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def special_tokens(self) -> dict[str, TokenId]:
        """Special token text -> id, in registration order."""
        return dict(self._special_toks)

    def freeze(self) -> None:
        """Make the vocabulary read-only; later registrations raise."""
        self._frozen = True

    def _check_writable(self, token: Token) -> None:
        if self._frozen:
            raise UnknownTokenError(
                "token not found in read-only vocabulary", invalid_tok=token
            )

    def id_of(self, token: Token) -> TokenId:
        """
        Return the id of ``token``, registering it with the next id if new.

        :raises UnknownTokenError: If the token is new and the vocabulary is frozen.
        """
        tok_id = self._token_to_id.get(token)
        if tok_id is not None:
            return tok_id

        self._check_writable(token)
        if not token:
            raise UnknownTokenError("tokens must be non-empty", invalid_tok=token)
        tok_id = len(self._id_to_token)
        self._token_to_id[token] = tok_id
        self._id_to_token.append(token)
        return tok_id

    def get_id(self, token: Token) -> TokenId | None:
        """Return the id of ``token`` without registering it."""
        return self._token_to_id.get(token)

    def token_of(self, tok_id: TokenId) -> Token:
        """
        Return the token registered under ``tok_id``.

        Special tokens resolve to the byte symbols of their UTF-8 text.

        :raises UnknownIdError: If the id was never registered.
        """
        if not 0 <= tok_id < len(self._id_to_token):
            raise UnknownIdError(
                "id not found in vocabulary",
                vocab_size=len(self._id_to_token),
                invalid_id=tok_id,
            )
        return self._id_to_token[tok_id]

    def add_special_token(self, seq: str) -> TokenId:
        """
        Register special token text and return its id.

        :raises SpecialTokenError: If ``seq`` is empty or already registered.
        """
        if not seq:
            raise SpecialTokenError("special tokens must be non-empty strings")
        if seq in self._special_toks:
            raise SpecialTokenError("duplicate special token", found_tokens={seq})
        if self._frozen:
            raise SpecialTokenError("cannot add special tokens to a read-only vocabulary")

        tok_id = len(self._id_to_token)
        self._special_toks[seq] = tok_id
        self._id_to_token.append(encode_bytes(seq.encode("utf-8")))
        return tok_id

    def special_id(self, seq: str) -> TokenId:
        """Return the id of registered special token text."""
        try:
            return self._special_toks[seq]
        except KeyError:
            raise UnknownTokenError(
                "special token not registered", invalid_tok=seq
            ) from None

    def frequency_of(self, token: Token) -> int:
        """
        Return the recorded frequency of ``token`` (0 if never counted).

        :raises UnknownTokenError: If the token was never registered.
        """
        if token not in self._token_to_id:
            raise UnknownTokenError("token not found in vocabulary", invalid_tok=token)
        return self._freqs[token]

    def add_frequency(self, token: Token, count: int) -> None:
        """Add ``count`` occurrences of a registered token."""
        if token not in self._token_to_id:
            raise UnknownTokenError("token not found in vocabulary", invalid_tok=token)
        self._freqs[token] += count

    def reset_frequencies(self) -> None:
        self._freqs.clear()
