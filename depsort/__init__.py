"""Dependency graph cycle checking and topological sorting."""

from depsort.graph import (
    CycleDetectedError,
    DependencyGraph,
    MalformedInputError,
    Node,
    build,
    detect_cycle,
    topological_sort,
)

__version__ = "0.1.0"

__all__ = [
    "CycleDetectedError",
    "DependencyGraph",
    "MalformedInputError",
    "Node",
    "build",
    "detect_cycle",
    "topological_sort",
]
