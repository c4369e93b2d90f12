"""
Task Graph

Declares named build tasks with prerequisites and runs each of them at most once
per invocation, in dependency order.
"""

from .core import (
    BuildError,
    CyclicDependencyError,
    DuplicateTaskError,
    Task,
    TaskError,
    TaskGraph,
    TaskResult,
    TaskStatus,
    UnknownTaskError,
)
from .decorators import group, task
from .executor import ExecutionResult, TaskExecutor

__all__ = [
    "BuildError",
    "CyclicDependencyError",
    "DuplicateTaskError",
    "ExecutionResult",
    "Task",
    "TaskError",
    "TaskExecutor",
    "TaskGraph",
    "TaskResult",
    "TaskStatus",
    "UnknownTaskError",
    "group",
    "task",
]
