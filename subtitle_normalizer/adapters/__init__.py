"""Adapters that connect external analyzers to the core Token Source protocol.

RULES:
- Adapters own their external handles; the core never imports them
- Each adapter lives in its own module under this package
"""

from subtitle_normalizer.adapters.mecab_tokenizer import (
    MeCabTokenSource,
    TokenizerUnavailableError,
    parse_features,
)

__all__ = ["MeCabTokenSource", "TokenizerUnavailableError", "parse_features"]
