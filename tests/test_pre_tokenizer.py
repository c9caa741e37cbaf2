"""Unit tests for GPT-2 style pre-tokenization."""

import pytest

from bytepair import PreTokenizer, TokenPattern
from bytepair.errors import PatternError


@pytest.fixture
def pre_tokenizer():
    return PreTokenizer()


# Splitting
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Hello, world!", ["Hello", ",", " world", "!"]),
        ("don't", ["don", "'t"]),
        ("I'm sure it's fine", ["I", "'m", " sure", " it", "'s", " fine"]),
        ("I have 123 apples", ["I", " have", " 123", " apples"]),
        ("Hello... What?!", ["Hello", "...", " What", "?!"]),
        ("hello   world", ["hello", "  ", " world"]),
        ("hi  ", ["hi", "  "]),
        ("a\nb", ["a", "\n", "b"]),
        ("", []),
    ],
)
def test_split(pre_tokenizer, text, expected):
    assert pre_tokenizer.split(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "The quick brown fox jumps over the lazy dog.",
        "  leading and trailing  \t\n",
        "mixed 123abc!!! ''quotes'' and\r\nnewlines",
        "Привет мир 世界 🦀",
    ],
)
def test_split_is_lossless(pre_tokenizer, text):
    """Chunks joined together reproduce the input."""
    assert "".join(pre_tokenizer.split(text)) == text


def test_no_prefix_space_added(pre_tokenizer):
    assert pre_tokenizer.split("word")[0] == "word"


# Byte-level symbols
# ---------------------------------------------------------------------------


def test_to_symbols_one_token_per_byte():
    assert PreTokenizer.to_symbols(" é") == ["Ġ", "Ã", "©"]
    assert PreTokenizer.to_symbols("🦀") == ["ð", "Ł", "¦", "Ģ"]


def test_pre_tokenize(pre_tokenizer):
    assert pre_tokenizer.pre_tokenize("a b") == [["a"], ["Ġ", "b"]]


# Special tokens
# ---------------------------------------------------------------------------


def test_split_with_specials(pre_tokenizer):
    result = pre_tokenizer.split_with_specials("a<|eot|> b", ["<|eot|>"])
    assert result == [("a", False), ("<|eot|>", True), (" b", False)]


def test_split_with_specials_prefers_longest(pre_tokenizer):
    result = pre_tokenizer.split_with_specials("<s><s><s>", ["<s>", "<s><s>"])
    assert result == [("<s><s>", True), ("<s>", True)]


def test_split_with_specials_is_lossless(pre_tokenizer):
    text = "x <|a|>y<|b|><|a|> z"
    chunks = pre_tokenizer.split_with_specials(text, ["<|a|>", "<|b|>"])
    assert "".join(chunk for chunk, _ in chunks) == text
    assert [chunk for chunk, special in chunks if special] == ["<|a|>", "<|b|>", "<|a|>"]


def test_split_without_specials_matches_split(pre_tokenizer):
    text = "Hello, world!"
    assert pre_tokenizer.split_with_specials(text, []) == [
        (chunk, False) for chunk in pre_tokenizer.split(text)
    ]


# Patterns
# ---------------------------------------------------------------------------


def test_custom_pattern():
    gpt2 = PreTokenizer()
    gpt4 = PreTokenizer(TokenPattern.GPT4.value)
    assert gpt2.split("123456") == ["123456"]
    assert gpt4.split("123456") == ["123", "456"]


def test_invalid_pattern_raises():
    with pytest.raises(PatternError):
        PreTokenizer("(unclosed")


def test_pattern_lookup_by_name():
    assert TokenPattern.get("gpt2") == TokenPattern.GPT2.value
    with pytest.raises(PatternError):
        TokenPattern.get("not-a-pattern")
