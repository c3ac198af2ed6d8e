"""Graphviz DOT reader producing labeled dependency edges.

This module turns a ``digraph`` description into the flat list of
(source, target) label pairs consumed by the graph builder. Only edge
statements are accepted:
- Undirected graphs are rejected
- Node, attribute and subgraph statements are rejected
- Edge chains (``a -> b -> c``) are split into consecutive pairs
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import pydot
import pyparsing

from depsort.log_config import get_logger

logger = get_logger(__name__)


class GraphFormatError(Exception):
    """Exception raised when DOT input cannot be turned into an edge list."""

    def __init__(self, message: str):
        """Initialize the exception with a descriptive message.

        Args:
            message: Description of the format problem
        """
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class SubgraphEndpoint:
    """An edge endpoint that names a subgraph instead of a single node.

    It is passed on to the graph builder, which rejects it as malformed.
    """

    members: tuple[str, ...]

    def __repr__(self) -> str:
        return f"subgraph {{{', '.join(self.members)}}}"


def _endpoint_label(endpoint: object) -> object:
    """Normalize a pydot edge endpoint to a plain label.

    Surrounding double quotes and node ports are dropped. A subgraph endpoint
    becomes a SubgraphEndpoint listing its node names.
    """
    if isinstance(endpoint, Mapping):
        nodes = endpoint.get("nodes") or {}
        return SubgraphEndpoint(tuple(str(_endpoint_label(name)) for name in nodes))

    if not isinstance(endpoint, str):
        return endpoint

    if endpoint.startswith('"'):
        closing = endpoint.rfind('"')
        if closing > 0:
            return endpoint[1:closing].replace('\\"', '"')
        return endpoint

    if endpoint.startswith("<"):
        return endpoint

    return endpoint.partition(":")[0]


def _reject_non_edge_statements(graph: pydot.Dot) -> None:
    node_names = [node.get_name() for node in graph.get_nodes()]
    if node_names:
        msg = f"Statement is not supported: node statement for {', '.join(node_names)}"
        raise GraphFormatError(msg)

    subgraphs = graph.get_subgraphs()
    if subgraphs:
        msg = f"Subgraphs are not supported: {subgraphs[0].get_name()}"
        raise GraphFormatError(msg)

    attributes = graph.get_attributes()
    if attributes:
        msg = f"Statement is not supported: graph attributes {', '.join(sorted(attributes))}"
        raise GraphFormatError(msg)


def parse_dot(text: str) -> list[tuple[str, str]]:
    """Parse DOT text into (source, target) label pairs.

    Args:
        text: DOT source describing a single directed graph

    Returns:
        Edge pairs in statement order

    Raises:
        GraphFormatError: If the text is not valid DOT, describes an undirected
            graph, or contains anything other than edge statements

    Example:
        >>> parse_dot("digraph { app -> lib -> core }")
        [('app', 'lib'), ('lib', 'core')]
    """
    try:
        graphs = pydot.graph_from_dot_data(text)
    except pyparsing.ParseBaseException as e:
        msg = f"Invalid DOT input: {e}"
        raise GraphFormatError(msg) from e

    if not graphs:
        msg = "Invalid DOT input: no graph could be parsed"
        raise GraphFormatError(msg)

    if len(graphs) > 1:
        logger.warning("multiple_graphs_in_input", graph_count=len(graphs), message="Using the first graph.")

    graph = graphs[0]
    if graph.get_type() != "digraph":
        msg = "Only directed graphs are supported"
        raise GraphFormatError(msg)

    _reject_non_edge_statements(graph)

    edges = sorted(graph.get_edges(), key=lambda edge: edge.obj_dict["sequence"])
    pairs = [
        (_endpoint_label(edge.get_source()), _endpoint_label(edge.get_destination()))
        for edge in edges
    ]

    if graph.obj_dict.get("strict"):
        # A strict graph holds at most one edge per (source, target)
        pairs = list(dict.fromkeys(pairs))

    logger.debug("dot_edges_parsed", edge_count=len(pairs))

    return pairs


def load_dot_file(path: str | Path) -> list[tuple[str, str]]:
    """Read a DOT file and parse it into (source, target) label pairs.

    Args:
        path: Path to the DOT file

    Returns:
        Edge pairs in statement order

    Raises:
        FileNotFoundError: If the file doesn't exist
        GraphFormatError: If the file cannot be read as UTF-8 text or its
            content is not an edge-only digraph
    """
    dot_path = Path(path)

    if not dot_path.exists():
        msg = f"Graph file not found: {dot_path}"
        raise FileNotFoundError(msg)

    logger.info("loading_graph_file", path=str(dot_path))

    try:
        text = dot_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        msg = f"Graph file is not valid UTF-8 text: {dot_path}"
        raise GraphFormatError(msg) from e
    except OSError as e:
        msg = f"Cannot read graph file {dot_path}: {e.strerror or e}"
        raise GraphFormatError(msg) from e

    return parse_dot(text)
