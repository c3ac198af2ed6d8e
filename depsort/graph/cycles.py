"""Cycle detection over a built node list.

The search is a depth-first traversal driven by an explicit stack so that very
deep dependency chains do not hit the interpreter's recursion limit. Each stack
frame stands in for one recursive call: the node, a cursor into its dependency
list telling which dependency to visit next, and the node that pushed it.
"""

from collections import deque

from depsort.graph.model import NodeList
from depsort.log_config import get_logger

logger = get_logger(__name__)


def detect_cycle(nodes: NodeList) -> tuple[int, int] | None:
    """Find one edge that closes a dependency cycle.

    Roots are tried in ascending index order and dependencies are followed in
    stored order, so the witness is the same for identical input.

    Args:
        nodes: Node list produced by build()

    Returns:
        ``(node, parent)`` where the edge parent -> node re-enters the current
        search path, or None if the graph is acyclic. A self-loop yields
        ``(node, node)``.

    Example:
        >>> from depsort.graph.model import build
        >>> detect_cycle(build([("A", "B"), ("B", "A")]))
        (0, 1)
    """
    # Kept apart: a node leaves the path once its subtree is done but stays processed.
    processed = [False] * len(nodes)
    on_path = [False] * len(nodes)
    stack: list[tuple[int, int, int | None]] = []

    for root in range(len(nodes)):
        if processed[root]:
            continue

        stack.append((root, 0, None))

        while stack:
            node, cursor, parent = stack.pop()

            if cursor == 0:
                if on_path[node]:
                    witness = (node, node if parent is None else parent)
                    logger.debug(
                        "cycle_detected",
                        node=nodes[node].label,
                        parent=nodes[witness[1]].label,
                    )
                    return witness
                if processed[node]:
                    # Finished by an earlier branch without reaching the path.
                    continue
                on_path[node] = True
                processed[node] = True

            deps = nodes[node].deps
            if cursor < len(deps):
                stack.append((node, cursor + 1, parent))
                stack.append((deps[cursor], 0, node))
            else:
                on_path[node] = False

    logger.debug("no_cycle_detected", node_count=len(nodes))
    return None


def cycle_path(nodes: NodeList, witness: tuple[int, int]) -> list[int]:
    """Reconstruct a full cycle through the witness edge.

    Follows the shortest dependency path from the re-entered node to the
    parent that closed the cycle, then closes it with the witness edge.

    Args:
        nodes: Node list produced by build()
        witness: Pair returned by detect_cycle()

    Returns:
        Node indices starting and ending with ``witness[0]``

    Raises:
        ValueError: If the witness does not describe a cycle in ``nodes``
    """
    start, parent = witness
    if start == parent:
        return [start, start]

    previous: dict[int, int] = {start: start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == parent:
            break
        for dep in nodes[current].deps:
            if dep not in previous:
                previous[dep] = current
                queue.append(dep)

    if parent not in previous or start not in nodes[parent].deps:
        msg = f"No cycle through edge {parent} -> {start}"
        raise ValueError(msg)

    path = [parent]
    while path[-1] != start:
        path.append(previous[path[-1]])
    path.reverse()
    path.append(start)

    return path
