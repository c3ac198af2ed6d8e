"""Topological ordering with Kahn's algorithm."""

from collections import deque

from depsort.graph.model import Node, NodeList
from depsort.log_config import get_logger

logger = get_logger(__name__)


def topological_sort(nodes: NodeList) -> list[Node]:
    """Order nodes so that every dependency comes before its dependents.

    Nodes with no remaining dependencies are released in ascending index
    order and then processed first-in first-out, so identical input always
    gives identical output.

    The graph must be acyclic; run detect_cycle() first. On a cyclic graph
    the result omits every node in or downstream of a cycle.

    Args:
        nodes: Node list produced by build()

    Returns:
        Every node exactly once, dependencies first

    Example:
        >>> from depsort.graph.model import build
        >>> [n.label for n in topological_sort(build([("A", "B"), ("B", "C")]))]
        ['C', 'B', 'A']
    """
    remaining = [len(node.deps) for node in nodes]
    dependents: list[list[int]] = [[] for _ in nodes]

    for index, node in enumerate(nodes):
        for dep in node.deps:
            dependents[dep].append(index)

    queue = deque(index for index, count in enumerate(remaining) if count == 0)
    order: list[int] = []

    while queue:
        index = queue.popleft()
        order.append(index)
        for dependent in dependents[index]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(nodes):
        logger.warning(
            "partial_topological_order",
            sorted_count=len(order),
            node_count=len(nodes),
            message="Graph has a cycle; nodes in or behind it were left out.",
        )
    else:
        logger.debug("topological_order_computed", node_count=len(nodes))

    return [nodes[index] for index in order]
