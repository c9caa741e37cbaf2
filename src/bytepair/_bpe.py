"""
Core Byte Pair Encoding (BPE) operations shared by training and encoding.
"""

from collections import Counter
from dataclasses import dataclass

from .types import Token, TokenPair


@dataclass(frozen=True, slots=True)
class MergeRule:
    """
    A learned instruction to replace the adjacent pair ``(left, right)``.

    ``rank`` is the 0-based order in which the rule was learned and is the
    order in which rules are applied at encode time.
    """

    left: Token
    right: Token
    merged: Token
    rank: int

    @property
    def pair(self) -> TokenPair:
        return (self.left, self.right)

    @classmethod
    def from_pair(cls, pair: TokenPair, rank: int) -> "MergeRule":
        """Build the rule for ``pair`` learned at position ``rank``."""
        left, right = pair
        return cls(left=left, right=right, merged=left + right, rank=rank)


def pair_counts(tokens: list[Token], weight: int = 1) -> Counter[TokenPair]:
    """
    Count every adjacent token pair in ``tokens``.

    :param tokens: Token sequence to analyze.
    :param weight: Amount added per occurrence (the word's corpus count).
    :returns: Mapping of token pairs to their weighted occurrence counts.
    """
    counts: Counter[TokenPair] = Counter()
    for pair in zip(tokens, tokens[1:]):
        counts[pair] += weight
    return counts


def merge_pair(tokens: list[Token], target: TokenPair, new_tok: Token) -> list[Token]:
    """
    Replace every non-overlapping occurrence of ``target``, scanning left to right.

    :param tokens: Original token sequence.
    :param target: The adjacent pair of tokens to merge.
    :param new_tok: The token that replaces the target pair.
    :returns: New token sequence with all target pairs replaced.
    """
    newtoks: list[Token] = []
    left, right = target

    i = 0
    n = len(tokens)
    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and tokens[i] == left and tokens[i + 1] == right:
            newtoks.append(new_tok)
            i += 2
        else:
            newtoks.append(tokens[i])
            i += 1

    return newtoks
