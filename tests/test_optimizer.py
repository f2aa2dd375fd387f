# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for the token optimizer.

Budget assertions use the optimizer's own count_tokens, so they hold both with
the tiktoken encoding and with the word-based fallback.
"""

import pytest

from swift_context.errors import TokenLimitExceededError
from swift_context.optimizer import TokenOptimizer, TokenOptimizing

# tiktoken raises for unknown names, which exercises the word-based fallback
UNKNOWN_ENCODING = "no-such-encoding"

SOURCE_WITH_COMMENTS = (
    "// This is a comment\n"
    "let x = 1\n"
    "/* This is a\n"
    "   multiline comment */\n"
    "let y = 2\n"
)


class TestTokenCounting:
    """Test token counting and the fallback approximation."""

    def test_fallback_counts_words(self):
        optimizer = TokenOptimizer(encoding_name=UNKNOWN_ENCODING)

        assert optimizer.count_tokens("") == 0
        assert optimizer.count_tokens("one two three four five six seven eight nine ten") == 13

    def test_fallback_logs_once(self, caplog):
        optimizer = TokenOptimizer(encoding_name=UNKNOWN_ENCODING)

        optimizer.count_tokens("a b c")
        optimizer.count_tokens("d e f")

        warnings = [r for r in caplog.records if "tiktoken" in r.getMessage()]
        assert len(warnings) == 1

    def test_longer_text_has_more_tokens(self):
        optimizer = TokenOptimizer()

        assert optimizer.count_tokens("struct Main {}") < optimizer.count_tokens(
            "struct Main {}\nstruct Other {}\nstruct Third {}"
        )

    def test_rejects_non_positive_budget(self):
        with pytest.raises(ValueError):
            TokenOptimizer(max_tokens=0)


class TestOptimize:
    """Test optimization strategies."""

    def test_no_optimization_needed_for_small_content(self):
        optimizer = TokenOptimizer(max_tokens=100)
        content = "This is a small content\n\n\n\n// with a comment\n"

        assert optimizer.optimize(content) == content

    def test_comments_removed_when_over_budget(self):
        optimizer = TokenOptimizer(max_tokens=12, encoding_name=UNKNOWN_ENCODING)

        optimized = optimizer.optimize(SOURCE_WITH_COMMENTS)

        assert "// This is a comment" not in optimized
        assert "/* This is a" not in optimized
        assert "multiline comment" not in optimized
        assert "let x = 1" in optimized
        assert "let y = 2" in optimized

    def test_blank_lines_collapsed_when_over_budget(self):
        optimizer = TokenOptimizer(max_tokens=10, encoding_name=UNKNOWN_ENCODING)
        content = "let a = 1\n\n\n\n\n// note\nlet b = 2\n"

        optimized = optimizer.optimize(content)

        assert "\n\n\n" not in optimized
        assert "let a = 1" in optimized
        assert "let b = 2" in optimized

    def test_content_truncated_to_budget(self):
        optimizer = TokenOptimizer(max_tokens=5)
        content = "This is a longer content that needs optimization " * 20

        optimized = optimizer.optimize(content)

        assert optimizer.count_tokens(optimized) <= 5
        assert content.startswith(optimized)

    def test_fallback_truncation_keeps_whole_words(self):
        optimizer = TokenOptimizer(max_tokens=5, encoding_name=UNKNOWN_ENCODING)

        optimized = optimizer.optimize("alpha beta gamma delta epsilon zeta eta theta")

        assert optimized == "alpha beta gamma"
        assert optimizer.count_tokens(optimized) <= 5

    def test_optimize_is_idempotent(self):
        optimizer = TokenOptimizer(max_tokens=8)
        content = SOURCE_WITH_COMMENTS * 10

        once = optimizer.optimize(content)

        assert optimizer.optimize(once) == once

    def test_fail_on_limit_raises(self):
        optimizer = TokenOptimizer(max_tokens=5, fail_on_limit=True)
        content = "This is a longer content that needs optimization " * 20

        with pytest.raises(TokenLimitExceededError) as exc_info:
            optimizer.optimize(content)

        assert exc_info.value.limit == 5
        assert exc_info.value.count > 5

    def test_fail_on_limit_passes_when_comment_removal_suffices(self):
        optimizer = TokenOptimizer(
            max_tokens=10, encoding_name=UNKNOWN_ENCODING, fail_on_limit=True
        )

        optimized = optimizer.optimize(SOURCE_WITH_COMMENTS)

        assert "let x = 1" in optimized


class TestInterface:
    """Test the optimizer interface."""

    def test_custom_optimizer_implements_interface(self):
        class Identity(TokenOptimizing):
            def optimize(self, context: str) -> str:
                return context

        assert Identity().optimize("x") == "x"

    def test_interface_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            TokenOptimizing()  # type: ignore[abstract]
