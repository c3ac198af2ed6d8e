"""Graph module for dependency validation and topological sorting.

This module provides the node model, the iterative cycle detector and the
Kahn's-algorithm sorter, plus a DependencyGraph facade tying them together.
"""

from depsort.graph.cycles import cycle_path, detect_cycle
from depsort.graph.dependency_graph import CycleDetectedError, DependencyGraph
from depsort.graph.model import MalformedInputError, Node, NodeList, build
from depsort.graph.sorter import topological_sort

__all__ = [
    "CycleDetectedError",
    "DependencyGraph",
    "MalformedInputError",
    "Node",
    "NodeList",
    "build",
    "cycle_path",
    "detect_cycle",
    "topological_sort",
]
