# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""MCP Server Protocol Layer for swift-context.

This module exposes dependency analysis and context bundles as MCP tools with
ZERO business logic. All analysis is delegated to one DependencyAnalyzer per
project root, so the graph and cache stay warm across tool invocations.
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.session import ServerSession

from swift_context.analyzers import DependencyAnalyzer
from swift_context.config import Config
from swift_context.fs_utils import canonical_path
from swift_context.generator import ContextGenerator
from swift_context.logging_setup import setup_logging
from swift_context.optimizer import TokenOptimizer

logger = logging.getLogger(__name__)

SERVER_NAME = "swift-context"


class SwiftContextMCPServer:
    """MCP Protocol Layer for swift-context.

    Responsibilities:
    - Initialize the MCP server and register tools
    - Translate tool invocations into analyzer and generator calls
    - Format results as JSON-compatible tool responses

    Analyzers are created lazily, one per canonical project root, and kept for
    the lifetime of the server.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        analyzer_factory: Optional[Callable[[Path], DependencyAnalyzer]] = None,
    ):
        """Initialize MCP server.

        Args:
            config: Configuration shared by all projects. If None, each project
                loads its own .swift_context.yml.
            analyzer_factory: Builds the analyzer for a project root. If None,
                creates a DependencyAnalyzer.
        """
        self.config = config
        self._analyzer_factory = analyzer_factory or self._default_analyzer
        self._analyzers: Dict[Path, DependencyAnalyzer] = {}

        self.mcp = FastMCP(name=SERVER_NAME)
        self._register_tools()

        logger.info("SwiftContextMCPServer initialized")

    def _default_analyzer(self, project_root: Path) -> DependencyAnalyzer:
        return DependencyAnalyzer(project_root, config=self.config)

    def get_analyzer(self, project_root: str) -> DependencyAnalyzer:
        """Return the analyzer for a project, creating it on first use."""
        root = canonical_path(project_root)
        analyzer = self._analyzers.get(root)
        if analyzer is None:
            analyzer = self._analyzer_factory(root)
            self._analyzers[root] = analyzer
            logger.info(f"Created analyzer for project {root}", extra={"project_root": root})
        return analyzer

    def generate_context(
        self, project_root: str, file_path: str, max_tokens: Optional[int] = None
    ) -> Dict[str, Any]:
        analyzer = self.get_analyzer(project_root)
        config = analyzer.config
        optimizer = TokenOptimizer(
            max_tokens=max_tokens if max_tokens is not None else config.max_tokens,
            encoding_name=config.token_encoding,
            fail_on_limit=config.fail_on_token_limit,
        )
        generator = ContextGenerator(analyzer=analyzer, optimizer=optimizer)
        context = generator.generate_context(Path(file_path))
        return {
            "file_path": str(canonical_path(file_path)),
            "context": context,
            "token_count": optimizer.count_tokens(context),
        }

    def analyze_dependencies(self, project_root: str, file_path: str) -> Dict[str, Any]:
        analyzer = self.get_analyzer(project_root)
        dependencies = analyzer.analyze(Path(file_path))
        direct = analyzer.direct_dependencies(Path(file_path))
        return {
            "file_path": str(canonical_path(file_path)),
            "dependencies": [str(path) for path in sorted(dependencies)],
            "direct_dependencies": [str(path) for path in sorted(direct)],
            "cache_statistics": analyzer.get_statistics().to_dict(),
        }

    def get_dependency_graph(self, project_root: str) -> Dict[str, Any]:
        return self.get_analyzer(project_root).export_graph()

    def _register_tools(self) -> None:
        """Register MCP tools with the server.

        Registers:
        - generate_context: Context bundle for a Swift file and its dependencies
        - analyze_dependencies: Dependency paths for a Swift file
        - get_dependency_graph: Export the graph analyzed so far for a project
        """

        @self.mcp.tool()
        async def generate_context(
            project_root: str,
            file_path: str,
            ctx: Context[ServerSession, None],
            max_tokens: Optional[int] = None,
        ) -> Dict[str, Any]:
            """Generate an LLM context bundle for a Swift file.

            The bundle contains the file and every project file it depends on,
            each preceded by a YAML front matter header, fitted to a token budget.

            Args:
                project_root: Root directory of the Swift package
                file_path: Path to the Swift file
                ctx: MCP context for logging and progress
                max_tokens: Token budget (default: from configuration)

            Returns:
                Dictionary with file_path, context and token_count.
            """
            await ctx.info(f"Generating context for {file_path}")
            try:
                response = self.generate_context(project_root, file_path, max_tokens)
            except Exception as e:
                await ctx.error(f"Error generating context for {file_path}: {e}")
                raise
            await ctx.info(f"Generated context: {response['token_count']} tokens")
            return response

        @self.mcp.tool()
        async def analyze_dependencies(
            project_root: str,
            file_path: str,
            ctx: Context[ServerSession, None],
        ) -> Dict[str, Any]:
            """List the project files a Swift file depends on.

            Args:
                project_root: Root directory of the Swift package
                file_path: Path to the Swift file
                ctx: MCP context for logging and progress

            Returns:
                Dictionary with transitive and direct dependency paths and
                cache statistics.
            """
            await ctx.info(f"Analyzing dependencies for {file_path}")
            try:
                response = self.analyze_dependencies(project_root, file_path)
            except Exception as e:
                await ctx.error(f"Error analyzing {file_path}: {e}")
                raise
            await ctx.info(f"Found {len(response['dependencies'])} dependencies")
            return response

        @self.mcp.tool()
        async def get_dependency_graph(
            project_root: str,
            ctx: Context[ServerSession, None],
        ) -> Dict[str, Any]:
            """Export the dependency graph analyzed so far for a project.

            Args:
                project_root: Root directory of the Swift package
                ctx: MCP context for logging and progress

            Returns:
                Dictionary with metadata, files, dependencies and most_depended_on.
            """
            await ctx.info(f"Exporting dependency graph for {project_root}")
            try:
                response = self.get_dependency_graph(project_root)
            except Exception as e:
                await ctx.error(f"Error exporting dependency graph: {e}")
                raise
            await ctx.info(
                f"Graph exported: {response['metadata']['total_files']} files, "
                f"{response['metadata']['total_edges']} edges"
            )
            return response

        logger.info(
            "MCP tools registered: generate_context, analyze_dependencies, get_dependency_graph"
        )

    def run(self, transport: str = "stdio") -> None:
        """Run the MCP server.

        Args:
            transport: Transport type to use. Options:
                - "stdio": Standard input/output (default)
                - "streamable-http": HTTP transport
                - "sse": Server-sent events transport
        """
        logger.info(f"Starting MCP server with {transport} transport")
        self.mcp.run(transport=transport)  # type: ignore[arg-type]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="swift-context MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--transport",
        type=str,
        choices=["stdio", "streamable-http", "sse"],
        default="stdio",
        help="Transport type for MCP server. Default: stdio",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file shared by all projects (default: per-project .swift_context.yml)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for JSON log files (default: no log file)",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Main entry point for MCP server."""
    args = parse_args()

    setup_logging(log_dir=args.log_dir)

    config = Config(config_path=args.config) if args.config is not None else None
    server = SwiftContextMCPServer(config=config)
    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
