"""Interfaces for the external morphological analyzer and user dictionary.

WHY: Tokenization is delegated to a host-supplied analyzer (MeCab in
production, an in-memory fake in tests). Stages receive the analyzer as
an explicit argument instead of reaching for a module-level singleton,
so any stage can be exercised with a fake and hosts decide when the
analyzer's dictionary gets loaded.

HOW: TokenSource and CustomDictionary are typing.Protocols; any object
with the right method satisfies them. tokenize() is the single await
point used by every tokenizing stage: coroutine sources are awaited
directly, synchronous sources run in a worker thread via
asyncio.to_thread so the event loop is never blocked.

RULES:
- Analyzer errors propagate unchanged; no stage retries or swallows them
- tokenize() always returns a list (sources may return any sequence)
- Empty text is passed to the source like any other text
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, List, Protocol, Sequence, Union, runtime_checkable

from subtitle_normalizer.core.models import Token

logger = logging.getLogger(__name__)


@runtime_checkable
class TokenSource(Protocol):
    """Anything that can split text into analyzer tokens."""

    def tokenize(self, text: str) -> Union[Sequence[Token], Awaitable[Sequence[Token]]]:
        ...


@runtime_checkable
class CustomDictionary(Protocol):
    """User dictionary lookup consulted by the misconversion detector."""

    def contains(self, surface: str) -> bool:
        ...


async def tokenize(source: TokenSource, text: str) -> List[Token]:
    """Tokenize text with a sync or async Token Source without blocking.

    Args:
        source: The analyzer handle owned by the host.
        text: Text to analyse.

    Returns:
        The tokens in input order.
    """
    if inspect.iscoroutinefunction(source.tokenize):
        tokens = await source.tokenize(text)
    else:
        tokens = await asyncio.to_thread(source.tokenize, text)
        if inspect.isawaitable(tokens):
            tokens = await tokens
    logger.debug("Tokenized %d chars into %d tokens", len(text), len(tokens))
    return list(tokens)
