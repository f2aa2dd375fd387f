# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Token budget enforcement for generated context bundles.

Strategies, applied only when the bundle is over budget and in order:
1. Remove // line comments and /* */ block comments
2. Collapse runs of three or more newlines into one blank line
3. Raise TokenLimitExceededError or truncate to the budget

Token counts use tiktoken's cl100k_base encoding by default, with a
word-based approximation if the encoding cannot be loaded.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

import tiktoken

from swift_context.errors import TokenLimitExceededError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 8192
DEFAULT_ENCODING = "cl100k_base"

# Approximate tokens per whitespace-separated word of source code
TOKENS_PER_WORD = 1.3

_LINE_COMMENT = re.compile(r"//[^\n]*\n")
_BLOCK_COMMENT = re.compile(r"/\*[^*]*\*+(?:[^/*][^*]*\*+)*/")
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
_WORD = re.compile(r"\S+")


class TokenOptimizing(ABC):
    """Abstract token optimizer consumed by ContextGenerator."""

    @abstractmethod
    def optimize(self, context: str) -> str:
        """Return a version of the context that fits the token budget."""
        pass


class TokenOptimizer(TokenOptimizing):
    """Shrinks a context bundle to fit within max_tokens.

    optimize() is idempotent: text already within budget is returned
    unchanged, and the result of an optimization is within budget.
    """

    def __init__(
        self,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        encoding_name: str = DEFAULT_ENCODING,
        fail_on_limit: bool = False,
    ):
        """Initialize optimizer.

        Args:
            max_tokens: Token budget for the optimized text. Must be positive.
            encoding_name: tiktoken encoding used for counting.
            fail_on_limit: Raise TokenLimitExceededError instead of truncating
                when comment and blank-line removal is not enough.
        """
        if max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {max_tokens}")
        self.max_tokens = max_tokens
        self.encoding_name = encoding_name
        self.fail_on_limit = fail_on_limit
        self._token_encoder: Optional[tiktoken.Encoding] = None
        self._encoder_failed = False

    def _get_token_encoder(self) -> Optional[tiktoken.Encoding]:
        """Get or initialize the tiktoken encoder.

        Uses lazy initialization to avoid loading encoding data in __init__.

        Returns:
            tiktoken.Encoding or None if unavailable.
        """
        if self._token_encoder is None and not self._encoder_failed:
            try:
                self._token_encoder = tiktoken.get_encoding(self.encoding_name)
            except Exception as e:
                logger.warning(f"Failed to initialize tiktoken encoder: {e}")
                self._encoder_failed = True
        return self._token_encoder

    def count_tokens(self, text: str) -> int:
        """Count tokens in text.

        Falls back to a word-based approximation if tiktoken is unavailable.
        """
        encoder = self._get_token_encoder()
        if encoder is not None:
            return len(encoder.encode(text))

        if not text:
            return 0
        return int(len(text.split()) * TOKENS_PER_WORD)

    def optimize(self, context: str) -> str:
        """Fit the context within the token budget.

        Raises:
            TokenLimitExceededError: If fail_on_limit is set and the text is
                still over budget after comment and blank-line removal.
        """
        token_count = self.count_tokens(context)
        if token_count <= self.max_tokens:
            return context

        logger.info(f"Context has {token_count} tokens, optimizing to {self.max_tokens}")
        optimized = self._collapse_blank_lines(self._remove_comments(context))

        token_count = self.count_tokens(optimized)
        if token_count <= self.max_tokens:
            return optimized

        if self.fail_on_limit:
            raise TokenLimitExceededError(token_count, self.max_tokens)

        logger.warning(
            f"Context still has {token_count} tokens after optimization, "
            f"truncating to {self.max_tokens}"
        )
        return self._truncate(optimized)

    @staticmethod
    def _remove_comments(text: str) -> str:
        text = _LINE_COMMENT.sub("\n", text)
        return _BLOCK_COMMENT.sub("", text)

    @staticmethod
    def _collapse_blank_lines(text: str) -> str:
        return _EXCESS_BLANK_LINES.sub("\n\n", text)

    def _truncate(self, text: str) -> str:
        encoder = self._get_token_encoder()
        if encoder is not None:
            truncated = encoder.decode(encoder.encode(text)[: self.max_tokens])
            # Decoding can merge a split multi-byte sequence into extra tokens
            while truncated and len(encoder.encode(truncated)) > self.max_tokens:
                truncated = truncated[:-1]
            return truncated

        # Keep whole words, cutting at the end of the last one within budget
        max_words = int(self.max_tokens / TOKENS_PER_WORD)
        end = 0
        for index, match in enumerate(_WORD.finditer(text)):
            if index >= max_words:
                break
            end = match.end()
        return text[:end]
