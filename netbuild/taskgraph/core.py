"""
Core Task Graph

This module provides the fundamental building blocks for declaring build tasks:
- Task: a named unit of work with prerequisites and an action
- TaskGraph: an owned registry of tasks with namespaces and dependency resolution
- BuildError and friends: the error taxonomy shared by the whole package
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

SEPARATOR = ":"


class BuildError(Exception):
    """Base class for all errors raised by netbuild."""

    pass


class TaskError(BuildError):
    """Raised when a task fails; carries the failing task and its cause."""

    def __init__(self, message: str, task_name: str = None, cause: Exception = None):
        self.task_name = task_name
        self.cause = cause
        super().__init__(message)


class DuplicateTaskError(BuildError):
    """Raised when a task name is declared twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Task '{name}' is already defined. Use replace() to redefine it."
        )


class UnknownTaskError(BuildError):
    """Raised when a task name cannot be resolved."""

    def __init__(self, name: str, required_by: str = None):
        self.name = name
        self.required_by = required_by
        message = f"Don't know how to build task '{name}'"
        if required_by:
            message += f" (required by '{required_by}')"
        super().__init__(message)


class CyclicDependencyError(BuildError):
    """Raised when prerequisite resolution revisits a task on the active path."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(f"Circular dependency detected: {' => '.join(self.cycle)}")


class TaskStatus(Enum):
    """Enumeration of possible task execution states."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class TaskResult:
    """Encapsulates the result of a task execution."""

    name: str
    status: TaskStatus
    error: Optional[Exception] = None
    execution_time: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the task completed successfully."""
        return self.status == TaskStatus.SUCCESS

    @property
    def failed(self) -> bool:
        """Check if the task failed."""
        return self.status == TaskStatus.FAILED


Action = Callable[[Any], None]


@dataclass
class Task:
    """
    A named unit of work.

    The action receives the build context of the current run. Tasks without an
    action only group their prerequisites.
    """

    name: str
    prerequisites: Tuple[str, ...] = ()
    action: Optional[Action] = None
    description: str = ""

    @property
    def scope(self) -> List[str]:
        """Namespace segments enclosing this task."""
        return self.name.split(SEPARATOR)[:-1]

    def execute(self, context: Any = None) -> None:
        """Run the task's own action, if it has one."""
        if self.action is not None:
            self.action(context)

    def __str__(self) -> str:
        return f"Task({self.name}): {self.description}"


class TaskGraph:
    """
    Registry of tasks keyed by qualified name.

    Each graph instance owns its tasks; there is no process-wide registry.
    Declaring a name twice raises DuplicateTaskError, and replace() is the only
    way to redefine an existing task.
    """

    def __init__(self):
        self._tasks: Dict[str, Task] = {}
        self._scope: List[str] = []

    def _qualify(self, name: str) -> str:
        if not name:
            raise BuildError("Task name must not be empty")
        return SEPARATOR.join(self._scope + [name])

    @contextmanager
    def namespace(self, name: str) -> Iterator["TaskGraph"]:
        """Scope the declarations made inside the block under ``name:``."""
        self._scope.append(name)
        try:
            yield self
        finally:
            self._scope.pop()

    def declare(
        self,
        name: str,
        prerequisites: Sequence[str] = (),
        action: Optional[Action] = None,
        description: str = "",
    ) -> Task:
        """
        Register a task in the current namespace.

        Args:
            name: Task name, relative to the current namespace
            prerequisites: Names of the tasks to run first
            action: Callable receiving the build context
            description: Human-readable description shown by ``list``

        Returns:
            The registered Task

        Raises:
            DuplicateTaskError: If the qualified name is already registered
        """
        qualified = self._qualify(name)
        if qualified in self._tasks:
            raise DuplicateTaskError(qualified)

        task = Task(qualified, tuple(prerequisites), action, description)
        self._tasks[qualified] = task
        logger.debug(f"Declared task: {qualified}")
        return task

    def replace(
        self,
        name: str,
        prerequisites: Sequence[str] = (),
        action: Optional[Action] = None,
        description: str = "",
    ) -> Task:
        """Redefine an existing task in the current namespace."""
        qualified = self._qualify(name)
        if qualified not in self._tasks:
            raise UnknownTaskError(qualified)

        task = Task(qualified, tuple(prerequisites), action, description)
        self._tasks[qualified] = task
        logger.debug(f"Replaced task: {qualified}")
        return task

    def get(self, name: str) -> Task:
        """Get a task by its qualified name."""
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def tasks(self) -> List[Task]:
        """All tasks in declaration order."""
        return list(self._tasks.values())

    def lookup(self, name: str, scope: Sequence[str] = ()) -> Task:
        """
        Resolve a prerequisite name relative to a namespace scope.

        The innermost enclosing namespace is tried first, then each outer one,
        and finally the name as an absolute one.
        """
        scope = list(scope)
        while scope:
            candidate = SEPARATOR.join(scope + [name])
            if candidate in self._tasks:
                return self._tasks[candidate]
            scope.pop()
        return self.get(name)

    def prerequisites_of(self, name: str) -> List[Task]:
        """The direct prerequisites of a task, resolved to Task objects."""
        task = self.get(name)
        try:
            return [self.lookup(dep, task.scope) for dep in task.prerequisites]
        except UnknownTaskError as e:
            raise UnknownTaskError(e.name, required_by=task.name) from None

    def resolve(self, *names: str) -> List[Task]:
        """
        Compute the run order for the requested tasks.

        Performs a depth-first traversal of prerequisites. Every reachable task
        appears exactly once, after all of its prerequisites. Tasks shared
        between several requested names are only scheduled once.

        Raises:
            UnknownTaskError: If a task or prerequisite is not registered
            CyclicDependencyError: If a prerequisite chain loops back on itself
        """
        order: List[Task] = []
        done = set()
        path: List[str] = []

        def visit(task: Task):
            if task.name in done:
                return
            if task.name in path:
                start = path.index(task.name)
                raise CyclicDependencyError(path[start:] + [task.name])

            path.append(task.name)
            for dependency in self.prerequisites_of(task.name):
                visit(dependency)
            path.pop()

            done.add(task.name)
            order.append(task)

        for name in names:
            visit(self.get(name))

        return order

    def invoke(self, *names: str, context: Any = None) -> List[str]:
        """
        Run the requested tasks and their prerequisites once each.

        The whole plan is resolved before any action runs. An exception raised
        by an action propagates immediately and stops the remaining tasks.

        Returns:
            Names of the tasks that ran, in order
        """
        plan = self.resolve(*names)
        for task in plan:
            logger.debug(f"** Execute {task.name}")
            task.execute(context)
        return [task.name for task in plan]

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __iter__(self):
        return iter(self._tasks.items())

    def __repr__(self) -> str:
        return f"<TaskGraph(tasks={len(self._tasks)})>"
