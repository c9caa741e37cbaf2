"""BPE training: learn an ordered merge table from a text corpus."""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Iterable

from ._bpe import MergeRule, merge_pair, pair_counts
from ._decorators import measure_time
from ._progress import _is_enabled, _progress_step
from ._sanitise import render_token
from .errors import InvalidMergeCountError
from .pre_tokenizer import PreTokenizer
from .types import Token, TokenPair
from .vocabulary import Vocabulary

log = logging.getLogger(__name__)


@dataclass
class Word:
    """One distinct pre-tokenized chunk of the corpus and how often it occurs."""

    tokens: list[Token]
    count: int


class Trainer:
    """
    BPE trainer that learns merge rules from pre-tokenized text.

    Example:
       >>> trainer = Trainer(merge_count=10)
       >>> merges = trainer.train(["hello world", "hello there"])
       >>> print(f"Learned {len(merges)} merges")
       >>> print(f"Vocabulary size: {len(trainer.vocab)}")
    """

    def __init__(self, merge_count: int, pattern: str | None = None) -> None:
        """
        :param merge_count: Maximum number of merges to learn.
        :param pattern: Split pattern; defaults to the GPT-2 pattern.
        :raises InvalidMergeCountError: If ``merge_count`` is not a non-negative int.
        """
        # bool is an int subclass but never a meaningful count
        if (
            isinstance(merge_count, bool)
            or not isinstance(merge_count, int)
            or merge_count < 0
        ):
            raise InvalidMergeCountError(
                "merge count must be a non-negative integer", merge_count=merge_count
            )
        self.merge_count = merge_count
        self.pre_tokenizer = PreTokenizer(pattern)
        self.vocab = Vocabulary()
        self.merges: list[MergeRule] = []

    @measure_time
    def train(
        self,
        texts: str | Iterable[str],
        special_tokens: Iterable[str] = (),
        verbose: bool = False,
    ) -> list[MergeRule]:
        """
        Learn up to ``merge_count`` merge rules from ``texts``.

        Every text is split into chunks, identical chunks are grouped into
        words, and the most frequent adjacent token pair across all words is
        merged until the merge budget is spent or no pair is left. Ties go to
        the pair whose text sorts first, then to the pair with smaller ids.

        After training ``self.vocab`` holds every token introduced along the
        way together with its final corpus frequency.

        :param texts: Training corpus, a single string or an iterable of strings.
        :param special_tokens: Special token strings cut out of the corpus so
            they never take part in merges.
        :param verbose: Log each learned merge when ``True``.
        :returns: Merge rules in the order they were learned.
        """
        if isinstance(texts, str):
            texts = [texts]

        self.vocab = Vocabulary()
        words = self._build_words(texts, special_tokens)

        counts, where = self._index_pairs(words)

        merges: list[MergeRule] = []
        step = _progress_step(self.merge_count)

        for rank in range(self.merge_count):
            best = self._select_pair(counts)
            if best is None:
                log.warning(
                    f"no more token pairs to merge after {rank} merges "
                    f"(requested {self.merge_count}) stopping early"
                )
                break

            left, right = best
            merged = left + right
            merged_id = self.vocab.id_of(merged)
            merges.append(MergeRule(left=left, right=right, merged=merged, rank=rank))

            if verbose:
                log.info(
                    f"merge {rank + 1}/{self.merge_count}: "
                    f"({render_token(left)!r}, {render_token(right)!r}) -> "
                    f"{merged_id} {render_token(merged)!r} (freq {counts[best]})"
                )

            self._merge_words(words, best, merged, counts, where)

            if _is_enabled() and (rank + 1) % step == 0:
                log.info(f"training progress: {rank + 1}/{self.merge_count} merges")

        self._record_frequencies(words)
        self.merges = merges

        log.info(
            f"learned {len(merges)} merges from {len(words)} unique chunks, "
            f"vocabulary has {len(self.vocab)} tokens"
        )
        return merges

    def _build_words(
        self, texts: Iterable[str], special_tokens: Iterable[str]
    ) -> list[Word]:
        """Group identical chunks of the corpus into words with occurrence counts."""
        specials = list(special_tokens)
        chunk_counts: Counter[str] = Counter()
        for text in texts:
            for chunk, is_special in self.pre_tokenizer.split_with_specials(
                text, specials
            ):
                if not is_special:
                    chunk_counts[chunk] += 1

        # Counter keeps first-seen order, so word order is fixed by the corpus
        words = [
            Word(tokens=PreTokenizer.to_symbols(chunk), count=count)
            for chunk, count in chunk_counts.items()
        ]
        log.debug(f"built {len(words)} unique words from corpus")
        return words

    @staticmethod
    def _index_pairs(
        words: list[Word],
    ) -> tuple[Counter[TokenPair], defaultdict[TokenPair, set[int]]]:
        """Tally pairs across words: pair -> weighted frequency, pair -> word indices."""
        counts: Counter[TokenPair] = Counter()
        where: defaultdict[TokenPair, set[int]] = defaultdict(set)
        for idx, word in enumerate(words):
            for pair, n in pair_counts(word.tokens, word.count).items():
                counts[pair] += n
                where[pair].add(idx)
        return counts, where

    @staticmethod
    def _merge_words(
        words: list[Word],
        best: TokenPair,
        merged: Token,
        counts: Counter[TokenPair],
        where: defaultdict[TokenPair, set[int]],
    ) -> None:
        """Rewrite every word holding ``best`` and patch both tallies in place."""
        # only words containing the winning pair need rewriting
        for idx in sorted(where.pop(best, set())):
            word = words[idx]
            before = pair_counts(word.tokens, word.count)
            word.tokens = merge_pair(word.tokens, best, merged)
            after = pair_counts(word.tokens, word.count)

            counts.subtract(before)
            counts.update(after)
            for pair in after:
                where[pair].add(idx)
            for pair in before:
                if pair not in after and pair != best:
                    holders = where.get(pair)
                    if holders is not None:
                        holders.discard(idx)
                        if not holders:
                            del where[pair]
                if counts[pair] <= 0:
                    counts.pop(pair, None)

    def _select_pair(self, counts: Counter[TokenPair]) -> TokenPair | None:
        """Return the most frequent pair, or ``None`` when nothing is left to merge."""
        if not counts:
            return None

        def sort_key(pair: TokenPair) -> tuple[int, str, int, int]:
            left, right = pair
            return (
                -counts[pair],
                left + right,
                self.vocab.id_of(left),
                self.vocab.id_of(right),
            )

        return min(counts, key=sort_key)

    def _record_frequencies(self, words: list[Word]) -> None:
        """Store the final corpus frequency of every token in the vocabulary."""
        self.vocab.reset_frequencies()
        for word in words:
            for tok in word.tokens:
                self.vocab.add_frequency(tok, word.count)


__all__ = ["Trainer", "Word"]
