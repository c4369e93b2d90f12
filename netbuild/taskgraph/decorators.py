"""
Decorators for declaring tasks

These decorators turn plain functions into task actions registered on an
explicit TaskGraph, so build scripts read as a flat list of steps.
"""

from typing import Callable, List, Optional, Sequence

from .core import TaskGraph


def task(
    graph: TaskGraph,
    name: str = None,
    depends_on: Sequence[str] = (),
    description: str = None,
):
    """
    Decorator that registers a function as the action of a new task.

    The function receives the build context. The task name defaults to the
    function name and the description to the first line of its docstring.

    Args:
        graph: Graph to register the task on
        name: Optional task name (relative to the current namespace)
        depends_on: Names of prerequisite tasks
        description: Optional description of what the task does

    Example:
        with graph.namespace("db"):
            @task(graph, "rebuild", description="Rebuilds the database")
            def rebuild(ctx):
                ...
    """

    def decorator(func: Callable) -> Callable:
        final_name = name or func.__name__
        final_description = description
        if final_description is None:
            doc = (func.__doc__ or "").strip()
            final_description = doc.splitlines()[0] if doc else ""

        graph.declare(final_name, depends_on, func, final_description)
        return func

    return decorator


def group(graph: TaskGraph, name: str, depends_on: List[str], description: Optional[str] = None):
    """Declare a task that only runs its prerequisites."""
    return graph.declare(name, depends_on, None, description or "")
