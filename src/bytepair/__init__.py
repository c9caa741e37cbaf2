"""bytepair: byte-level BPE training and tokenization."""

from ._bpe import MergeRule
from ._progress import disable_progress, enable_progress
from .byte_level import decode_symbol, encode_byte
from .decoder import Decoder
from .encoder import Encoder
from .errors import (
    BytePairError,
    InvalidMergeCountError,
    PatternError,
    SpecialTokenError,
    StrategyError,
    TrainingError,
    UnknownIdError,
    UnknownTokenError,
    VocabularyError,
)
from .pattern import TokenPattern, get_pattern, list_patterns
from .pre_tokenizer import PreTokenizer
from .strategy import (
    AllowAllStrategy,
    AllowCustomStrategy,
    AllowNoneRaiseStrategy,
    AllowNoneStrategy,
    SpecialTokenStrategy,
    get_strategy,
    list_strategies,
)
from .tokenizer import Tokenizer
from .trainer import Trainer
from .vocabulary import Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bytepair")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "Trainer",
    "MergeRule",
    "Vocabulary",
    "PreTokenizer",
    "Encoder",
    "Decoder",
    "TokenPattern",
    "encode_byte",
    "decode_symbol",
    "SpecialTokenStrategy",
    "AllowAllStrategy",
    "AllowNoneStrategy",
    "AllowNoneRaiseStrategy",
    "AllowCustomStrategy",
    "get_strategy",
    "get_pattern",
    "list_patterns",
    "list_strategies",
    "enable_progress",
    "disable_progress",
    "BytePairError",
    "VocabularyError",
    "UnknownIdError",
    "UnknownTokenError",
    "TrainingError",
    "InvalidMergeCountError",
    "SpecialTokenError",
    "PatternError",
    "StrategyError",
]
