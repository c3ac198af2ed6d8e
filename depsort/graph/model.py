"""Graph model and construction from a flat edge list.

Nodes are stored in a flat list and refer to each other purely by index.
The index of a node is its position in the list, assigned in the order labels
are first seen while building.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from depsort.log_config import get_logger

logger = get_logger(__name__)

EDGE_ENDPOINT_COUNT = 2


class MalformedInputError(Exception):
    """Exception raised when an edge is not a plain two-endpoint directed edge.

    Construction stops at the first offending element; no partial graph is
    returned.
    """

    def __init__(self, message: str, index: int, edge: object):
        """Initialize the exception.

        Args:
            message: Description of what is wrong with the edge
            index: Position of the offending element in the edge list
            edge: The offending element itself
        """
        super().__init__(message)
        self.message = message
        self.index = index
        self.edge = edge


@dataclass
class Node:
    """A graph vertex: its label and the indices of the nodes it depends on.

    Attributes:
        label: Node label as it appeared in the input
        deps: Indices of direct dependencies, in input order (duplicates kept)
    """

    label: str
    deps: list[int] = field(default_factory=list)


NodeList = list[Node]


def _validate_edge(position: int, edge: object) -> tuple[str, str]:
    if not isinstance(edge, tuple | list):
        msg = f"Edge #{position} is not a (source, target) pair: {edge!r}"
        raise MalformedInputError(msg, position, edge)

    if len(edge) != EDGE_ENDPOINT_COUNT:
        msg = f"Edge #{position} has {len(edge)} endpoints, expected {EDGE_ENDPOINT_COUNT}: {edge!r}"
        raise MalformedInputError(msg, position, edge)

    source, target = edge
    for endpoint in (source, target):
        if not isinstance(endpoint, str):
            msg = f"Edge #{position} has a non-label endpoint: {endpoint!r}"
            raise MalformedInputError(msg, position, edge)

    return source, target


def build(edges: Sequence[tuple[str, str]]) -> NodeList:
    """Build a node list from (source, target) label pairs.

    Each distinct label gets exactly one node. Each pair appends the target's
    index to the source's dependency list.

    Args:
        edges: Ordered (source, target) pairs, meaning "source depends on target"

    Returns:
        Node list addressable by index

    Raises:
        MalformedInputError: If any element is not a pair of two string labels

    Example:
        >>> nodes = build([("A", "B"), ("B", "C")])
        >>> [(n.label, n.deps) for n in nodes]
        [('A', [1]), ('B', [2]), ('C', [])]
    """
    nodes: NodeList = []
    indices: dict[str, int] = {}

    def index_of(label: str) -> int:
        index = indices.get(label)
        if index is None:
            index = len(nodes)
            indices[label] = index
            nodes.append(Node(label))
        return index

    for position, edge in enumerate(edges):
        try:
            source, target = _validate_edge(position, edge)
        except MalformedInputError as e:
            logger.exception("malformed_edge", position=position, error=e.message)
            raise

        source_index = index_of(source)
        target_index = index_of(target)
        nodes[source_index].deps.append(target_index)

    logger.debug(
        "graph_built",
        node_count=len(nodes),
        edge_count=sum(len(node.deps) for node in nodes),
    )

    return nodes
