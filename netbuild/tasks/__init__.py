"""
The .NET build, declared as a task graph.

Run ``netbuild list`` to see the described tasks. ``default`` clobbers,
compiles everything, runs the specifications and packages the application.
"""

from ..taskgraph import TaskGraph
from . import compile, database, environment, generate, housekeeping, package, quality

MODULES = (environment, housekeeping, generate, database, compile, quality, package)


def build_graph() -> TaskGraph:
    """Declare every build task on a fresh graph."""
    graph = TaskGraph()
    for module in MODULES:
        module.register(graph)
    return graph


__all__ = ["build_graph"]
