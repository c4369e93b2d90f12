"""
CLI context shared by the netbuild commands.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from netbuild.core.context import BuildContext
from netbuild.taskgraph import TaskExecutor, TaskGraph
from netbuild.tasks import build_graph

logger = logging.getLogger(__name__)


@dataclass
class CLIContext:
    """
    Shared state for one command line invocation.

    Attributes:
        verbose: Enable debug logging
        environment: Environment chosen with --env (None for the default)
        _graph: Task graph (lazy-initialized)
        _build: Build context handed to task actions (lazy-initialized)
    """
    verbose: bool = False
    environment: Optional[str] = None
    _graph: Optional[TaskGraph] = field(default=None, repr=False, init=False)
    _build: Optional[BuildContext] = field(default=None, repr=False, init=False)

    @property
    def graph(self) -> TaskGraph:
        if self._graph is None:
            self._graph = build_graph()
            logger.debug("Declared %d tasks", len(self._graph))
        return self._graph

    @property
    def build(self) -> BuildContext:
        if self._build is None:
            self._build = BuildContext()
        return self._build

    def executor(self) -> TaskExecutor:
        return TaskExecutor(self.graph, self.build)
