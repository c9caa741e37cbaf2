"""
Byte-level BPE tokenizer built from merge rules and special tokens.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Iterable, Sequence

from ._bpe import MergeRule
from .byte_level import SYMBOL_TO_BYTE
from .decoder import Decoder
from .encoder import Encoder
from .errors import VocabularyError
from .pre_tokenizer import PreTokenizer
from .types import Token, TokenId
from .vocabulary import Vocabulary

# need only classname for type annotation
if TYPE_CHECKING:
    from .strategy import SpecialTokenStrategy
    from .trainer import Trainer

log = logging.getLogger(__name__)


class Tokenizer:
    """
    Encodes text to ids and decodes ids to text with a fixed merge table.

    Built with no merges and no special tokens the tokenizer is a plain
    byte-level passthrough: every UTF-8 byte becomes the id equal to its value.

    Example:
       >>> tok = Tokenizer([], ["<|endoftext|>"])
       >>> tok.encode("<|endoftext|>Hi")
       [256, 72, 105]
       >>> tok.decode([256, 72, 105])
       '<|endoftext|>Hi'
    """

    def __init__(
        self,
        merges: Iterable[MergeRule | tuple[Token, Token]] = (),
        special_tokens: Iterable[str] = (),
        pattern: str | None = None,
    ) -> None:
        """
        :param merges: Merge rules, or plain ``(left, right)`` pairs ranked by position.
        :param special_tokens: Special token strings; ids follow the 256 byte ids
            in the given order.
        :param pattern: Split pattern; defaults to the GPT-2 pattern.
        :raises VocabularyError: If a merge rule is inconsistent.
        :raises SpecialTokenError: If a special token is empty or repeated.
        """
        self._merges: list[MergeRule] = _to_rules(merges)
        self.vocab = Vocabulary.build(self._merges, special_tokens)
        # no registrations after construction, readers need no locking
        self.vocab.freeze()
        self.pre_tokenizer = PreTokenizer(pattern)
        self.encoder = Encoder(self._merges, self.vocab, self.pre_tokenizer)
        self.decoder = Decoder(self.vocab)

        log.debug(
            f"tokenizer ready: {len(self._merges)} merge rules, "
            f"{len(self.vocab.special_tokens)} special tokens, {len(self.vocab)} total tokens"
        )

    @classmethod
    def from_trainer(
        cls,
        trainer: "Trainer",
        texts: str | Iterable[str],
        special_tokens: Iterable[str] = (),
    ) -> "Tokenizer":
        """
        Train ``trainer`` on ``texts`` and build a tokenizer from the result.

        Special tokens are kept out of training and registered afterwards.
        """
        special_tokens = list(special_tokens)
        merges = trainer.train(texts, special_tokens=special_tokens)
        return cls(merges, special_tokens, pattern=trainer.pre_tokenizer.pat)

    @property
    def merges(self) -> list[MergeRule]:
        """Merge rules in rank order."""
        return list(self._merges)

    @property
    def special_tokens(self) -> dict[str, TokenId]:
        return self.vocab.special_tokens

    def vocab_size(self) -> int:
        """Return the number of ids in the vocabulary."""
        return len(self.vocab)

    def encode(
        self, text: str, strategy: "SpecialTokenStrategy | None" = None
    ) -> list[TokenId]:
        """
        Encode text into a sequence of ids.

        Registered special tokens are matched atomically and always become
        exactly one id. A ``strategy`` narrows down which special tokens are
        honoured; without one all of them are.

        :param text: Text to encode.
        :param strategy: Special token handling strategy.
        :returns: Encoded id sequence, empty for empty text.
        """
        special_toks = self.vocab.special_tokens
        if strategy is not None:
            special_toks = strategy.handle(text, special_toks)
        return self.encoder.encode(text, special_toks)

    def decode(self, ids: Iterable[TokenId], errors: str = "replace") -> str:
        """
        Decode a sequence of ids back into text.

        :param errors: How to handle invalid UTF-8, "strict" or "replace".
        :raises UnknownIdError: If any id is not in the vocabulary.
        """
        return self.decoder.decode(ids, errors=errors)

    def encode_batch(
        self,
        texts: Sequence[str],
        strategy: "SpecialTokenStrategy | None" = None,
        num_workers: int | None = None,
    ) -> list[list[TokenId]]:
        """
        Encode many texts, in parallel when more than one worker is available.

        :param texts: Text inputs to encode.
        :param strategy: Optional special token handling strategy.
        :param num_workers: Worker threads; defaults to the CPU count, 1 runs serially.
        :returns: Encoded id sequences in input order.
        """
        workers = _resolve_workers(num_workers)
        if workers == 1 or len(texts) <= 1:
            return [self.encode(text, strategy) for text in texts]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda text: self.encode(text, strategy), texts))

    def decode_batch(
        self,
        id_batch: Sequence[Sequence[TokenId]],
        errors: str = "replace",
        num_workers: int | None = None,
    ) -> list[str]:
        """Decode many id sequences; results are returned in input order."""
        workers = _resolve_workers(num_workers)
        if workers == 1 or len(id_batch) <= 1:
            return [self.decode(ids, errors) for ids in id_batch]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda ids: self.decode(ids, errors), id_batch))


def _resolve_workers(num_workers: int | None) -> int:
    if num_workers is None:
        return os.cpu_count() or 1
    # "0" interpreted as 1 worker
    return max(1, num_workers)


def _to_rules(merges: Iterable[MergeRule | tuple[Token, Token]]) -> list[MergeRule]:
    """Normalise merges to validated rules sorted by rank."""
    rules: list[MergeRule] = []
    for idx, merge in enumerate(merges):
        rule = merge if isinstance(merge, MergeRule) else MergeRule.from_pair(merge, idx)

        if not rule.left or not rule.right or rule.merged != rule.left + rule.right:
            raise VocabularyError(
                f"merge rule {rule.rank} does not join its two tokens",
                invalid_tok=rule.merged,
            )
        # every symbol must map back to a byte or decoding would fail later
        for tok in (rule.left, rule.right):
            if any(sym not in SYMBOL_TO_BYTE for sym in tok):
                raise VocabularyError(
                    f"merge rule {rule.rank} contains non byte-level symbols",
                    invalid_tok=tok,
                )
        rules.append(rule)

    rules.sort(key=lambda r: r.rank)
    return rules


__all__ = ["Tokenizer"]
