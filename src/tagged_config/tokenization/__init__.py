"""Tokenization layer for tagged configuration loading.

Key Components:
    TagTokenizer: Converts decoded text into tokens
    Token: A single token with its type, value and source position
    TokenType: Enumeration of all token types
    TokenPosition: Line/column/offset of a token
"""

from .tokenizer import (
    TagTokenizer,
    Token,
    TokenPosition,
    TokenType,
    decode_entities,
)

__all__ = [
    "TagTokenizer",
    "Token",
    "TokenPosition",
    "TokenType",
    "decode_entities",
]
