# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures: a throwaway Swift package layout on disk."""

import logging
import os
from pathlib import Path
from typing import List, Tuple

import pytest


class MockProject:
    """A Swift package at <tmp>/TestProject with one module, Sources/<module_name>/."""

    def __init__(self, base: Path, module_name: str = "TestModule"):
        self.project_root = (base / "TestProject").resolve()
        self.sources_dir = self.project_root / "Sources"
        self.module_name = module_name
        self.module_dir = self.sources_dir / module_name
        self.module_dir.mkdir(parents=True, exist_ok=True)

    def create_file(self, name: str, content: str) -> Path:
        """Write a file into the module directory and return its canonical path."""
        path = self.module_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path.resolve()

    def create_files(self, files: List[Tuple[str, str]]) -> List[Path]:
        return [self.create_file(name, content) for name, content in files]

    def add_module(self, module_name: str) -> Path:
        module_dir = self.sources_dir / module_name
        module_dir.mkdir(parents=True, exist_ok=True)
        return module_dir

    @staticmethod
    def touch_later(path: Path, seconds: float = 10.0) -> None:
        """Move a file's modification time forward without relying on clock granularity."""
        stat = os.stat(path)
        os.utime(path, (stat.st_atime + seconds, stat.st_mtime + seconds))


@pytest.fixture
def project(tmp_path: Path) -> MockProject:
    """Create an empty Swift package with a TestModule module."""
    return MockProject(tmp_path)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Remove the handlers setup_logging() installs and restore the root level."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
