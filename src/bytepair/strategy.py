"""Special token handling for encoding."""

from typing import Final, Literal, overload, override
from abc import ABC, abstractmethod
import logging

from .errors import SpecialTokenError, StrategyError
from .types import TokenId

log = logging.getLogger(__name__)


class SpecialTokenStrategy(ABC):
    """Decides which registered special tokens are honoured for one encode call."""

    @abstractmethod
    def handle(
        self, text: str, special_toks: dict[str, TokenId]
    ) -> dict[str, TokenId]:
        """Return the special tokens to match atomically in ``text``."""


class AllowAllStrategy(SpecialTokenStrategy):
    """Match every registered special token (the default)."""

    @override
    def handle(
        self, text: str, special_toks: dict[str, TokenId]
    ) -> dict[str, TokenId]:
        return special_toks


class AllowNoneRaiseStrategy(SpecialTokenStrategy):
    """Raise if registered special tokens appear in the text."""

    @override
    def handle(
        self, text: str, special_toks: dict[str, TokenId]
    ) -> dict[str, TokenId]:
        found = {seq for seq in special_toks if seq in text}
        if found:
            raise SpecialTokenError(
                "special tokens found in text but not allowed", found_tokens=found
            )
        return {}


class AllowNoneStrategy(SpecialTokenStrategy):
    """Encode special token text like any other text."""

    @override
    def handle(
        self, text: str, special_toks: dict[str, TokenId]
    ) -> dict[str, TokenId]:
        if any(seq in text for seq in special_toks):
            log.warning("special tokens found in text, encoding them as plain text")
        return {}


class AllowCustomStrategy(SpecialTokenStrategy):
    """Match only the given subset of registered special tokens."""

    def __init__(self, allowed_subset: set[str]) -> None:
        super().__init__()
        self.allowed_subset = allowed_subset

    @override
    def handle(
        self, text: str, special_toks: dict[str, TokenId]
    ) -> dict[str, TokenId]:
        return {
            seq: tok for seq, tok in special_toks.items() if seq in self.allowed_subset
        }


StrategyName = Literal["all", "none", "none-raise", "custom"]

_SPECIAL_TOKEN_STRATEGIES: Final[dict[str, type[SpecialTokenStrategy]]] = {
    "all": AllowAllStrategy,
    "none": AllowNoneStrategy,
    "none-raise": AllowNoneRaiseStrategy,
    "custom": AllowCustomStrategy,
}


def list_strategies() -> list[str]:
    """Return available special token strategy names."""
    return list(_SPECIAL_TOKEN_STRATEGIES.keys())


@overload
def get_strategy(
    name: Literal["all", "none", "none-raise"],
) -> SpecialTokenStrategy: ...


@overload
def get_strategy(
    name: Literal["custom"], allowed_subset: set[str]
) -> AllowCustomStrategy: ...


def get_strategy(
    name: StrategyName = "all", allowed_subset: set[str] | None = None
) -> SpecialTokenStrategy:
    """
    Create a special token strategy by name.

    :param name: Strategy identifier: "all", "none", "none-raise", or "custom".
    :param allowed_subset: Required for "custom"; tokens allowed during encoding.
    :raises StrategyError: If name is unknown or allowed_subset is missing for custom.

    .. code-block:: python

        strategy = get_strategy("none-raise")
        strategy = get_strategy("custom", allowed_subset={"<|endoftext|>"})
    """
    if name not in _SPECIAL_TOKEN_STRATEGIES:
        raise StrategyError(
            "unknown strategy name",
            invalid_name=name,
            available_strats=list(_SPECIAL_TOKEN_STRATEGIES.keys()),
        )

    if name == "custom":
        if allowed_subset is None:
            raise StrategyError("allowed_subset is required for custom strategy")
        return AllowCustomStrategy(allowed_subset)

    return _SPECIAL_TOKEN_STRATEGIES[name]()


__all__ = [
    "StrategyName",
    "SpecialTokenStrategy",
    "AllowAllStrategy",
    "AllowNoneStrategy",
    "AllowNoneRaiseStrategy",
    "AllowCustomStrategy",
    "list_strategies",
    "get_strategy",
]
