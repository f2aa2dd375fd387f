# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Command-line interface for swift-context.

Example usage:
    $ swift-context -p ./MyProject -f ./MyProject/Sources/App/Main.swift
    $ swift-context --project-root ./MyProject --file Sources/App/Main.swift --max-tokens 4000
    $ swift-context -p . -f ./Sources/App/Main.swift --verbose
    $ swift-context -p . -f ./Sources/App/Main.swift --graph
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from swift_context import __version__
from swift_context.analyzers import DependencyAnalyzer
from swift_context.config import Config
from swift_context.errors import SwiftContextError
from swift_context.generator import ContextGenerator
from swift_context.logging_setup import setup_logging
from swift_context.optimizer import TokenOptimizer

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list. If None, uses sys.argv[1:].

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="swift-context",
        description=(
            "Analyze a Swift source file and its dependencies and generate a "
            "token-bounded context bundle for LLM interactions."
        ),
        epilog=__doc__.split("Example usage:", 1)[1] if __doc__ else None,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-p",
        "--project-root",
        type=Path,
        required=True,
        help="Path to the project root directory",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        required=True,
        help="Path to the target Swift file",
    )
    parser.add_argument(
        "-m",
        "--max-tokens",
        type=int,
        default=None,
        help="Maximum number of tokens in the output (default: from config, 8192)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed dependency information",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a configuration file (default: <project-root>/.swift_context.yml)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for JSON log files (default: no log file)",
    )
    parser.add_argument(
        "--graph",
        action="store_true",
        help="Print the dependency graph as JSON instead of the context bundle",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Build the configuration from the config file and command-line overrides.

    Raises:
        ConfigurationError: If an override is invalid.
    """
    if args.config is not None:
        config = Config(config_path=args.config)
    else:
        config = Config.for_project(args.project_root)

    if args.max_tokens is not None:
        config.override("max_tokens", args.max_tokens)
    return config


def run(args: argparse.Namespace) -> str:
    """Analyze the requested file and return the text to print.

    Raises:
        SwiftContextError: On any analysis, configuration or token budget error.
    """
    config = load_config(args)
    analyzer = DependencyAnalyzer(args.project_root, config=config)

    if args.verbose:
        print(f"Analyzing dependencies for: {args.file}")
        dependencies = analyzer.analyze(args.file)
        print("\nDependencies found:")
        for dependency in sorted(dependencies):
            print(f"- {dependency}")
        print("\nGenerating context...")

    if args.graph:
        analyzer.analyze(args.file)
        return json.dumps(analyzer.export_graph(), indent=2)

    optimizer = TokenOptimizer(
        max_tokens=config.max_tokens,
        encoding_name=config.token_encoding,
        fail_on_limit=config.fail_on_token_limit,
    )
    generator = ContextGenerator(analyzer=analyzer, optimizer=optimizer)
    return generator.generate_context(args.file)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the swift-context command.

    Returns:
        Process exit status: 0 on success, 1 on error.
    """
    args = parse_args(argv)

    setup_logging(
        log_dir=args.log_dir,
        log_level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        output = run(args)
    except (SwiftContextError, OSError) as e:
        logger.debug("Context generation failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
