#!/usr/bin/env python3
"""Main Entry Point and CLI Integration.

This module provides the command-line interface for depsort. It loads
configuration, reads a DOT dependency graph, builds it, and either reports
whether it contains a circular dependency (``check``) or prints its nodes in
dependency order (``sort``).
"""

import argparse
import sys
from collections.abc import Sequence

from depsort.config import DepsortConfig, load_config
from depsort.dot_loader import GraphFormatError, load_dot_file
from depsort.graph import CycleDetectedError, DependencyGraph, MalformedInputError
from depsort.log_config import bind_context, clear_context, configure_logging, get_logger

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def load_graph(input_path: str) -> DependencyGraph:
    """Read a DOT file and build its dependency graph.

    Args:
        input_path: Path to the DOT file

    Returns:
        The built DependencyGraph

    Raises:
        FileNotFoundError: If the file doesn't exist
        GraphFormatError: If the file is not an edge-only digraph
        MalformedInputError: If an edge is not a plain two-label edge
    """
    edges = load_dot_file(input_path)
    graph = DependencyGraph.from_edges(edges)
    logger.info("graph_loaded", **graph.get_stats())
    return graph


def report_cycle_path(graph: DependencyGraph) -> None:
    """Print the full detected cycle to stderr."""
    path = graph.cycle_path()
    if path:
        print(f"Cycle: {' -> '.join(path)}", file=sys.stderr)


def run_check(graph: DependencyGraph, config: DepsortConfig) -> int:
    """Report whether the graph has a circular dependency.

    Args:
        graph: Graph to check
        config: Loaded configuration

    Returns:
        Exit code
    """
    cycle = graph.detect_cycle()
    if cycle is None:
        print("The graph has no circular dependencies")
        return EXIT_SUCCESS

    source, target = cycle
    print(f"Circular dependency detected between {source} and {target}", file=sys.stderr)
    if config.output.show_cycle_path:
        report_cycle_path(graph)

    return EXIT_FAILURE if config.output.check_fails_on_cycle else EXIT_SUCCESS


def run_sort(graph: DependencyGraph, config: DepsortConfig) -> int:
    """Print the graph's nodes in dependency order, one per line.

    Args:
        graph: Graph to sort
        config: Loaded configuration

    Returns:
        Exit code
    """
    try:
        order = graph.sort()
    except CycleDetectedError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        print("           Cannot sort a graph with cycles", file=sys.stderr)
        if config.output.show_cycle_path:
            report_cycle_path(graph)
        return EXIT_FAILURE

    for label in order:
        print(label)

    return EXIT_SUCCESS


COMMANDS = {
    "check": run_check,
    "sort": run_sort,
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="depsort",
        description="Check a dependency graph for cycles and sort it topologically",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report circular dependencies
  depsort check deps.dot

  # Print nodes with dependencies first
  depsort sort deps.dot

  # Use a configuration file and debug logging
  depsort --config depsort.yaml --debug sort deps.dot
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to configuration YAML file (default: depsort.yaml if present)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug output (DEBUG level)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: from configuration, WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Detect circular dependencies")
    check_parser.add_argument("input_path", help="Path to a DOT digraph")

    sort_parser = subparsers.add_parser("sort", help="Print nodes in dependency order")
    sort_parser.add_argument("input_path", help="Path to a DOT digraph")

    args = parser.parse_args(argv)

    if args.debug:
        args.log_level = "DEBUG"

    return args


def main(argv: Sequence[str] | None = None) -> int:
    """Run depsort with the given arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)

    # Configured again once the file settings are known
    configure_logging(args.log_level or "WARNING")

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.exception("configuration_error", error=str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(args.log_level or config.logging_level, json_logs=config.json_logs)
    bind_context(command=args.command, input_path=args.input_path)

    try:
        graph = load_graph(args.input_path)
        return COMMANDS[args.command](graph, config)

    except FileNotFoundError as e:
        logger.exception("graph_file_not_found", error=str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    except (GraphFormatError, MalformedInputError) as e:
        logger.exception("invalid_graph_input", error=e.message)
        print(f"ERROR: {e.message}", file=sys.stderr)
        return EXIT_FAILURE

    finally:
        clear_context()


if __name__ == "__main__":
    sys.exit(main())
