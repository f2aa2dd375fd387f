# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for context bundle generation.

The generator is exercised with injected doubles for the analyzer and the
optimizer, and end to end with the real DependencyAnalyzer.
"""

from pathlib import Path
from typing import Iterable, Set

import pytest

from swift_context.analyzers import DependencyAnalyzer, DependencyAnalyzing
from swift_context.errors import InvalidModuleError
from swift_context.generator import ContextGenerator
from swift_context.optimizer import TokenOptimizer, TokenOptimizing


class StubAnalyzer(DependencyAnalyzing):
    """Returns the same dependencies for every file."""

    def __init__(self, dependencies: Iterable[Path] = ()):
        self.dependencies = {path.resolve() for path in dependencies}

    def analyze(self, file: Path) -> Set[Path]:
        return set(self.dependencies)


class WordLimitOptimizer(TokenOptimizing):
    """Keeps at most max_words space-separated words."""

    def __init__(self, max_words: int = 100):
        self.max_words = max_words

    def optimize(self, context: str) -> str:
        words = context.split(" ")
        if len(words) > self.max_words:
            return " ".join(words[: self.max_words])
        return context


class TestGenerateContext:
    """Test bundle assembly with injected collaborators."""

    def test_single_file_without_dependencies(self, project):
        main = project.create_file("Main.swift", "struct Main {}")
        generator = ContextGenerator(analyzer=StubAnalyzer(), optimizer=WordLimitOptimizer(100))

        context = generator.generate_context(main)

        assert context.startswith("---\nfile: Main.swift\n")
        assert "module: TestModule" in context
        assert "dependencies: []" in context
        assert context.endswith("---\n\nstruct Main {}")

    def test_file_with_dependencies(self, project):
        dependency, main = project.create_files(
            [
                ("Dependency.swift", "struct Dependency {}"),
                ("Main.swift", "struct Main { let dep: Dependency }"),
            ]
        )
        generator = ContextGenerator(
            analyzer=StubAnalyzer([dependency]), optimizer=WordLimitOptimizer(100)
        )

        context = generator.generate_context(main)

        assert "struct Dependency" in context
        assert "struct Main" in context
        assert "dependencies:\n  - Dependency.swift" in context
        assert "file: Main.swift" in context
        assert "file: Dependency.swift" in context

    def test_root_block_first_then_dependencies_in_path_order(self, project):
        zeta, alpha, main = project.create_files(
            [
                ("Zeta.swift", "struct Zeta {}"),
                ("Alpha.swift", "struct Alpha {}"),
                ("Main.swift", "struct Main {}"),
            ]
        )
        generator = ContextGenerator(
            analyzer=StubAnalyzer([zeta, alpha]), optimizer=WordLimitOptimizer(1000)
        )

        context = generator.generate_context(main)

        positions = [context.index(f"file: {name}") for name in ("Main", "Alpha", "Zeta")]
        assert positions == sorted(positions)
        assert "struct Alpha {}\n\n---\nfile: Zeta.swift" in context

    def test_optimizer_limit_applied(self, project):
        main = project.create_file(
            "Main.swift",
            "struct Main {\n    let value1: String\n    let value2: String\n    let value3: String\n}",
        )
        generator = ContextGenerator(analyzer=StubAnalyzer(), optimizer=WordLimitOptimizer(5))

        context = generator.generate_context(main)

        assert len(context.split(" ")) <= 5

    def test_invalid_module_aborts_without_bundle(self, project):
        loose = project.sources_dir / "Loose.swift"
        loose.write_text("struct Loose {}")
        generator = ContextGenerator(analyzer=StubAnalyzer(), optimizer=WordLimitOptimizer())

        with pytest.raises(InvalidModuleError):
            generator.generate_context(loose)


class TestEndToEnd:
    """Test the generator with the real analyzer and optimizer."""

    def test_bundle_contains_transitive_dependencies(self, project):
        project.create_files(
            [
                ("Leaf.swift", "struct Leaf {}\n"),
                ("Middle.swift", "struct Middle {\n    let leaf: Leaf\n}\n"),
                ("Main.swift", "struct Main {\n    let middle: Middle\n}\n"),
            ]
        )
        analyzer = DependencyAnalyzer(project.project_root)
        generator = ContextGenerator(analyzer=analyzer, optimizer=TokenOptimizer(max_tokens=8192))

        context = generator.generate_context(project.module_dir / "Main.swift")

        blocks = context.split("\n\n---\n")
        assert len(blocks) == 3
        assert blocks[0].startswith("---\nfile: Main.swift\n")
        assert "dependencies:\n  - Middle.swift\n" in blocks[0]
        assert blocks[1].startswith("file: Leaf.swift\n")
        assert "dependencies: []" in blocks[1]
        assert blocks[2].startswith("file: Middle.swift\n")
        assert "dependencies:\n  - Leaf.swift\n" in blocks[2]

    def test_generation_is_deterministic(self, project):
        project.create_files(
            [
                ("Dependency.swift", "struct Dependency {}\n"),
                ("Main.swift", "struct Main {\n    let dependency: Dependency\n}\n"),
            ]
        )
        analyzer = DependencyAnalyzer(project.project_root)
        generator = ContextGenerator(analyzer=analyzer, optimizer=TokenOptimizer())
        main = project.module_dir / "Main.swift"

        assert generator.generate_context(main) == generator.generate_context(main)

    def test_bundle_after_former_dependency_deleted(self, project):
        dependency, main = project.create_files(
            [
                ("Dependency.swift", "struct Dependency {}\n"),
                ("Main.swift", "struct Main {\n    let dependency: Dependency\n}\n"),
            ]
        )
        analyzer = DependencyAnalyzer(project.project_root)
        generator = ContextGenerator(analyzer=analyzer, optimizer=TokenOptimizer())
        assert "file: Dependency.swift" in generator.generate_context(main)

        main.write_text("struct Main {}\n")
        project.touch_later(main)
        dependency.unlink()

        context = generator.generate_context(main)

        assert context.startswith("---\nfile: Main.swift\n")
        assert "dependencies: []" in context
        assert "Dependency.swift" not in context
