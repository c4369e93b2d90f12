"""
Task Executor

This module drives a TaskGraph for the command line:
- Dependency-ordered, strictly sequential execution
- Progress tracking and per-task timing
- Fail-fast error handling with the failing task identified
- Dry runs that report the plan without executing it
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .core import Task, TaskError, TaskGraph, TaskResult, TaskStatus


@dataclass
class ExecutionResult:
    """
    Result of executing one or more top-level tasks.
    """

    success: bool
    task_results: Dict[str, TaskResult] = field(default_factory=dict)
    execution_time: float = 0.0

    @property
    def total_tasks(self) -> int:
        return len(self.task_results)

    @property
    def executed(self) -> List[str]:
        """Names of the tasks in the order they were processed."""
        return list(self.task_results)


class TaskExecutor:
    """
    Runs tasks from a graph against a build context, one at a time.

    Every task runs to completion before the next starts. The first failure
    stops the run and is raised as a TaskError naming the failing task.
    """

    def __init__(self, graph: TaskGraph, context: Any = None):
        self.graph = graph
        self.context = context
        self.logger = logging.getLogger(__name__)

        # Progress tracking
        self.progress_callbacks: List[Callable[[str, float, str], None]] = []

    def add_progress_callback(self, callback: Callable[[str, float, str], None]):
        """
        Add a callback function to receive progress updates.

        Callback signature: (task_name: str, progress: float, message: str) -> None
        """
        self.progress_callbacks.append(callback)

    def _notify_progress(self, task_name: str, progress: float, message: str = ""):
        """Notify all registered progress callbacks."""
        for callback in self.progress_callbacks:
            try:
                callback(task_name, progress, message)
            except Exception as e:
                self.logger.warning(f"Progress callback failed: {e}")

    def execute(self, *names: str, dry_run: bool = False) -> ExecutionResult:
        """
        Execute the named tasks and all their prerequisites.

        Args:
            *names: Qualified names of the tasks to run
            dry_run: Only report what would run

        Returns:
            ExecutionResult: Results of every processed task

        Raises:
            UnknownTaskError: If a name cannot be resolved (nothing runs)
            CyclicDependencyError: If the prerequisites loop (nothing runs)
            TaskError: If a task action fails
        """
        start_time = time.time()
        plan = self.graph.resolve(*names)
        result = ExecutionResult(success=True)

        self.logger.debug(
            f"Execution plan: {', '.join(task.name for task in plan) or '(empty)'}"
        )

        for task in plan:
            if dry_run:
                self.logger.info(f"** Execute (dry run) {task.name}")
                result.task_results[task.name] = TaskResult(
                    task.name, TaskStatus.SKIPPED
                )
                continue

            task_result = self.execute_task(task)
            result.task_results[task.name] = task_result

            if task_result.failed:
                result.success = False
                result.execution_time = time.time() - start_time
                raise self._failure(task, task_result.error)

        result.execution_time = time.time() - start_time
        self.logger.debug(
            f"Completed {result.total_tasks} task(s) in {result.execution_time:.2f}s"
        )
        return result

    def execute_task(self, task: Task) -> TaskResult:
        """
        Run a single task's own action, without its prerequisites.

        Args:
            task: The task to run

        Returns:
            TaskResult: Success, or failure carrying the raised exception
        """
        start_time = time.time()
        self._notify_progress(task.name, 0.0, "Starting task")
        self.logger.debug(f"** Invoke {task.name}")

        try:
            task.execute(self.context)
        except Exception as e:
            elapsed = time.time() - start_time
            self.logger.error(f"Task {task.name} failed: {e}")
            self._notify_progress(task.name, 0.5, f"Task failed: {e}")
            return TaskResult(task.name, TaskStatus.FAILED, error=e, execution_time=elapsed)

        elapsed = time.time() - start_time
        self.logger.debug(f"Finished {task.name} in {elapsed:.2f}s")
        self._notify_progress(task.name, 1.0, "Task completed successfully")
        return TaskResult(task.name, TaskStatus.SUCCESS, execution_time=elapsed)

    def _failure(self, task: Task, error: Exception) -> TaskError:
        if isinstance(error, TaskError):
            return error
        failure = TaskError(
            f"Task '{task.name}' failed: {error}", task_name=task.name, cause=error
        )
        failure.__cause__ = error
        return failure

    def describe(self, show_all: bool = False) -> List[Task]:
        """
        Tasks to show in a listing, sorted by name.

        Only described tasks are returned unless ``show_all`` is set.
        """
        tasks = [t for t in self.graph.tasks() if show_all or t.description]
        return sorted(tasks, key=lambda t: t.name)

    def prerequisites_of(self, name: str) -> List[str]:
        """Names of the direct prerequisites of a task."""
        return [t.name for t in self.graph.prerequisites_of(name)]

    def __repr__(self) -> str:
        return f"<TaskExecutor(tasks={len(self.graph)})>"
