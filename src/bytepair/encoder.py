"""Encode text into token ids by replaying learned merges."""

import logging
from typing import Iterable

from ._bpe import MergeRule, merge_pair
from .pre_tokenizer import PreTokenizer
from .types import Token, TokenId, TokenPair
from .vocabulary import Vocabulary

log = logging.getLogger(__name__)


class Encoder:
    """
    Applies merge rules, lowest rank first, to each pre-tokenized chunk.

    Merging the lowest-ranked pair present until none is left reproduces the
    order in which the rules were learned.
    """

    def __init__(
        self,
        merges: Iterable[MergeRule],
        vocab: Vocabulary,
        pre_tokenizer: PreTokenizer,
    ) -> None:
        # pair -> rule; first rule wins if a pair is listed twice
        self.ranks: dict[TokenPair, MergeRule] = {}
        for rule in sorted(merges, key=lambda r: r.rank):
            self.ranks.setdefault(rule.pair, rule)
        self.vocab = vocab
        self.pre_tokenizer = pre_tokenizer
        log.debug(f"encoder loaded {len(self.ranks)} merge rules")

    def encode(
        self, text: str, special_toks: Iterable[str] | None = None
    ) -> list[TokenId]:
        """
        Encode text into a sequence of ids.

        :param text: Text to encode.
        :param special_toks: Special tokens to match atomically; defaults to
            every special token registered in the vocabulary.
        :raises UnknownTokenError: If a produced token has no vocabulary entry.
        """
        if special_toks is None:
            special_toks = self.vocab.special_tokens

        ids: list[TokenId] = []
        for chunk, is_special in self.pre_tokenizer.split_with_specials(
            text, special_toks
        ):
            if is_special:
                # special tokens have pre-determined ids and are never merged
                ids.append(self.vocab.special_id(chunk))
                continue
            tokens = self.apply_merges(self.pre_tokenizer.to_symbols(chunk))
            ids.extend(self.vocab.id_of(tok) for tok in tokens)
        return ids

    def apply_merges(self, tokens: list[Token]) -> list[Token]:
        """Merge adjacent pairs in rank order until no rule applies."""
        while len(tokens) >= 2:
            best = min(zip(tokens, tokens[1:]), key=self._rank_of)
            rule = self.ranks.get(best)
            if rule is None:
                break
            tokens = merge_pair(tokens, best, rule.merged)
        return tokens

    def _rank_of(self, pair: TokenPair) -> float:
        rule = self.ranks.get(pair)
        return float("inf") if rule is None else rule.rank
