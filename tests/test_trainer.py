"""Unit tests for BPE merge learning."""

import logging
from collections import Counter

import pytest

from bytepair import MergeRule, Trainer
from bytepair.trainer import Word
from bytepair._progress import _is_enabled, disable_progress, enable_progress
from bytepair.errors import InvalidMergeCountError


CORPUS = ["hello world", "hello rust", "world peace"]


def pairs(merges: list[MergeRule]) -> list[tuple[str, str]]:
    return [rule.pair for rule in merges]


# Configuration
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("merge_count", [-1, 1.5, "3", True, None])
def test_invalid_merge_count(merge_count):
    with pytest.raises(InvalidMergeCountError):
        Trainer(merge_count)


# Edge cases
# ---------------------------------------------------------------------------


def test_empty_corpus():
    trainer = Trainer(10)
    assert trainer.train([]) == []
    assert len(trainer.vocab) == 256


def test_zero_merges_leaves_base_vocabulary():
    trainer = Trainer(0)
    assert trainer.train(CORPUS) == []
    assert len(trainer.vocab) == 256


def test_single_byte_chunks_stop_early(caplog):
    trainer = Trainer(5)
    with caplog.at_level(logging.WARNING, logger="bytepair.trainer"):
        assert trainer.train(["a", "b", "!"]) == []
    assert "stopping early" in caplog.text


def test_accepts_single_string():
    assert Trainer(3).train("aa aa aa") == Trainer(3).train(["aa aa aa"])


# Merge selection
# ---------------------------------------------------------------------------


def test_learns_expected_merges():
    merges = Trainer(5).train(CORPUS)

    assert pairs(merges) == [
        ("e", "l"),
        ("el", "l"),
        ("ell", "o"),
        ("h", "ello"),
        ("l", "d"),
    ]
    assert [rule.rank for rule in merges] == [0, 1, 2, 3, 4]
    assert [rule.merged for rule in merges] == ["el", "ell", "ello", "hello", "ld"]


def test_most_frequent_pair_wins():
    merges = Trainer(2).train(["banana banana nana", "banana"])
    assert pairs(merges) == [("n", "a"), ("na", "na")]


def test_training_is_deterministic():
    first = Trainer(5).train(CORPUS)
    second = Trainer(5).train(CORPUS)
    assert first == second

    trainer = Trainer(20)
    assert trainer.train(CORPUS) == trainer.train(CORPUS)


def test_tie_break_prefers_smaller_pair():
    """Equal counts go to the pair whose text sorts first, not to corpus order."""
    assert pairs(Trainer(1).train(["zy", "ab"])) == [("a", "b")]
    assert pairs(Trainer(1).train(["ab", "zy"])) == [("a", "b")]
    # byte symbols for space sort after ascii letters
    assert pairs(Trainer(1).train(["ba ab"])) == [("a", "b")]


def test_tie_break_falls_back_to_ids():
    """Equal counts and equal text go to the pair with the smaller ids."""
    trainer = Trainer(1)
    assert trainer.vocab.id_of("ab") == 256
    assert trainer.vocab.id_of("bc") == 257

    # (97, 257) sorts before (256, 99)
    forward = Counter({("ab", "c"): 2, ("a", "bc"): 2})
    backward = Counter({("a", "bc"): 2, ("ab", "c"): 2})
    assert trainer._select_pair(forward) == ("a", "bc")
    assert trainer._select_pair(backward) == ("a", "bc")


def test_merge_bound_and_exhaustion():
    """Training stops once pairs run out and longer budgets add nothing."""
    short = Trainer(1).train(["zy", "ab"])
    exhausted = Trainer(5).train(["zy", "ab"])
    longer = Trainer(50).train(["zy", "ab"])

    assert len(short) == 1
    assert pairs(exhausted) == [("a", "b"), ("z", "y")]
    assert longer == exhausted
    assert exhausted[: len(short)] == short


def test_special_tokens_excluded_from_training():
    text = "<|eot|><|eot|><|eot|>"
    assert Trainer(10).train([text], special_tokens=["<|eot|>"]) == []
    assert Trainer(10).train([text]) != []


def test_merges_never_cross_chunks():
    merges = Trainer(50).train(["ab ab ab"])
    assert all("Ġ" not in rule.merged[1:] for rule in merges)


def test_pair_index_drops_words_that_lose_a_pair():
    """After a merge the index only lists words that still hold each pair."""
    words = [Word(tokens=list("abab"), count=1), Word(tokens=list("abc"), count=1)]
    counts, where = Trainer._index_pairs(words)
    assert dict(where) == {("a", "b"): {0, 1}, ("b", "a"): {0}, ("b", "c"): {1}}

    Trainer._merge_words(words, ("a", "b"), "ab", counts, where)

    assert [w.tokens for w in words] == [["ab", "ab"], ["ab", "c"]]
    assert dict(where) == {("ab", "ab"): {0}, ("ab", "c"): {1}}
    assert counts == Counter({("ab", "ab"): 1, ("ab", "c"): 1})


# Vocabulary
# ---------------------------------------------------------------------------


def test_vocabulary_ids_follow_rank_order():
    trainer = Trainer(5)
    merges = trainer.train(CORPUS)
    assert [trainer.vocab.get_id(rule.merged) for rule in merges] == [256, 257, 258, 259, 260]
    assert len(trainer.vocab) == 261


def test_vocabulary_holds_final_frequencies():
    trainer = Trainer(5)
    trainer.train(CORPUS)
    vocab = trainer.vocab

    assert vocab.frequency_of("hello") == 2
    assert vocab.frequency_of("ld") == 2
    # fully merged away
    assert vocab.frequency_of("el") == 0
    # " world", " rust", " peace"
    assert vocab.frequency_of("Ġ") == 3
    # both from "peace"
    assert vocab.frequency_of("e") == 2


def test_trainer_keeps_last_merges():
    trainer = Trainer(2)
    merges = trainer.train(CORPUS)
    assert trainer.merges == merges


# Logging
# ---------------------------------------------------------------------------


def test_verbose_logs_each_merge(caplog):
    with caplog.at_level(logging.INFO, logger="bytepair.trainer"):
        Trainer(2).train(CORPUS, verbose=True)
    assert "merge 1/2" in caplog.text
    assert "merge 2/2" in caplog.text
    assert "('e', 'l') -> 256 'el' (freq 2)" in caplog.text


def test_progress_toggle(monkeypatch):
    monkeypatch.delenv("BYTEPAIR_DISABLE_PROGRESS", raising=False)
    disable_progress()
    assert not _is_enabled()
    enable_progress()
    assert _is_enabled()
    monkeypatch.setenv("BYTEPAIR_DISABLE_PROGRESS", "1")
    assert not _is_enabled()
