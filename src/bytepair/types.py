"""
Core types for tokenization.
"""

# one printable character standing for exactly one raw byte
type Symbol = str
# non-empty concatenation of symbols
type Token = str
type TokenId = int
type TokenPair = tuple[Token, Token]
