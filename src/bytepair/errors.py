"""Custom exception hierarchy for bytepair tokenization errors."""

import regex as re


class BytePairError(Exception):
    """Base exception for all bytepair errors."""


class SpecialTokenError(BytePairError):
    """Raised when special token handling fails."""

    def __init__(self, message: str, *, found_tokens: set[str] | None = None) -> None:
        """Initialize with optional found_tokens that get appended to the message."""
        if found_tokens:
            message = f"{message} (found: {', '.join(sorted(found_tokens))})"
        super().__init__(message)
        self.found_tokens = found_tokens


class VocabularyError(BytePairError):
    """Raised when vocabulary operations fail."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_id: int | None = None,
        invalid_tok: str | None = None,
    ) -> None:
        """Initialize with optional lookup context that gets appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # decoding: id never registered
        if invalid_id is not None:
            extra += f"(invalid id: {invalid_id}) "
        # encoding: symbol string never registered
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok!r}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_id = invalid_id
        self.invalid_tok = invalid_tok


class UnknownIdError(VocabularyError):
    """Raised when a token id has no vocabulary entry."""


class UnknownTokenError(VocabularyError):
    """Raised when a token has no vocabulary entry."""


class TrainingError(BytePairError):
    """Raised when tokenizer training fails."""

    def __init__(self, message: str, *, merge_count: object = None) -> None:
        if merge_count is not None:
            message = f"{message} (merge count: {merge_count!r})"
        super().__init__(message)
        self.merge_count = merge_count


class InvalidMergeCountError(TrainingError):
    """Raised when a trainer is configured with an unusable merge count."""


class PatternError(BytePairError):
    """Raised when compiling and/or validating regex patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        :param message: Error message.
        :param pattern: The regex pattern that failed.
        :param regex_err: The underlying error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err


class StrategyError(BytePairError):
    """Raised when strategy operations fail."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available_strats: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available_strats}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available_strats = available_strats
