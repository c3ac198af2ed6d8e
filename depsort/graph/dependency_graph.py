"""Dependency graph facade over the builder, cycle detector and sorter.

This module provides the DependencyGraph class which builds a node list once
from an edge list and answers cycle and ordering queries on it, refusing to
sort a graph that contains a cycle.
"""

from collections.abc import Sequence

from depsort.graph.cycles import cycle_path, detect_cycle
from depsort.graph.model import NodeList, build
from depsort.graph.sorter import topological_sort
from depsort.log_config import get_logger

logger = get_logger(__name__)


class CycleDetectedError(Exception):
    """Exception raised when ordering is requested for a graph with a cycle.

    A cycle means that nodes have circular dependencies, making it impossible
    to determine a valid order.
    """

    def __init__(self, message: str, source: str, target: str):
        """Initialize the exception with a descriptive message.

        Args:
            message: Description of the cycle detection error
            source: Label of the node where the cycle re-entered the path
            target: Label of the node whose edge closed the cycle
        """
        super().__init__(message)
        self.message = message
        self.source = source
        self.target = target


class DependencyGraph:
    """Read-only dependency graph built once from labeled edges.

    Thread-safety:
        Instances are never mutated after construction. Each caller that
        needs its own graph should build its own instance.

    Example:
        >>> graph = DependencyGraph.from_edges([("app", "lib"), ("lib", "core")])
        >>> graph.detect_cycle() is None
        True
        >>> graph.sort()
        ['core', 'lib', 'app']
    """

    def __init__(self, nodes: NodeList):
        """Wrap an already built node list.

        Args:
            nodes: Node list produced by build()
        """
        self.nodes = nodes
        self._witness: tuple[int, int] | None = None
        self._checked = False

    @classmethod
    def from_edges(cls, edges: Sequence[tuple[str, str]]) -> "DependencyGraph":
        """Build a graph from (source, target) label pairs.

        Args:
            edges: Pairs meaning "source depends on target"

        Returns:
            The built graph

        Raises:
            MalformedInputError: If an element is not a plain two-label edge
        """
        logger.info("building_dependency_graph", edge_count=len(edges))
        graph = cls(build(edges))
        logger.info("dependency_graph_built", node_count=len(graph.nodes))
        return graph

    @property
    def labels(self) -> list[str]:
        """Node labels in index order."""
        return [node.label for node in self.nodes]

    def _find_witness(self) -> tuple[int, int] | None:
        if not self._checked:
            self._witness = detect_cycle(self.nodes)
            self._checked = True
        return self._witness

    def detect_cycle(self) -> tuple[str, str] | None:
        """Check the graph for a circular dependency.

        Returns:
            Labels ``(node, parent)`` of the edge parent -> node that closes a
            cycle, or None if the graph is acyclic
        """
        witness = self._find_witness()
        if witness is None:
            logger.info("no_cycle_found", node_count=len(self.nodes))
            return None

        node, parent = witness
        logger.warning(
            "cycle_found",
            node=self.nodes[node].label,
            parent=self.nodes[parent].label,
        )
        return self.nodes[node].label, self.nodes[parent].label

    def cycle_path(self) -> list[str] | None:
        """Get the full cycle through the detected witness edge.

        Returns:
            Labels along the cycle, first and last being the same node, or
            None if the graph is acyclic
        """
        witness = self._find_witness()
        if witness is None:
            return None
        return [self.nodes[index].label for index in cycle_path(self.nodes, witness)]

    def sort(self) -> list[str]:
        """Get the node labels in dependency order.

        Returns:
            Labels such that every dependency precedes its dependents

        Raises:
            CycleDetectedError: If the graph contains a cycle
        """
        cycle = self.detect_cycle()
        if cycle is not None:
            source, target = cycle
            msg = f"Circular dependency detected between {source} and {target}"
            logger.error("refusing_to_sort_cyclic_graph", source=source, target=target)
            raise CycleDetectedError(msg, source, target)

        return [node.label for node in topological_sort(self.nodes)]

    def get_stats(self) -> dict[str, int]:
        """Get statistics about the graph.

        Returns:
            Dictionary with graph statistics including:
                - total_nodes: Number of distinct labels
                - total_edges: Number of dependency edges, duplicates included
                - self_loops: Number of edges from a node to itself
        """
        stats = {
            "total_nodes": len(self.nodes),
            "total_edges": sum(len(node.deps) for node in self.nodes),
            "self_loops": sum(
                node.deps.count(index) for index, node in enumerate(self.nodes)
            ),
        }

        logger.debug("graph_stats_retrieved", **stats)

        return stats
