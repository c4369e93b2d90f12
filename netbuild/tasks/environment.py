"""
Environment selection tasks (env:development, env:test, env:production).
"""
from ..core.config import ENVIRONMENTS
from ..taskgraph import TaskGraph

NAMESPACE = "env"


def _switch_to(environment: str):
    def action(ctx):
        ctx.configure(environment)

    action.__name__ = f"configure_{environment}"
    return action


def register(graph: TaskGraph) -> None:
    with graph.namespace(NAMESPACE):
        for environment in ENVIRONMENTS:
            graph.declare(
                environment,
                action=_switch_to(environment),
                description=f"Switches the configuration to the {environment} environment",
            )


def requested_environment(task_names):
    """The environment named by the first ``env:*`` task, if any."""
    prefix = f"{NAMESPACE}:"
    for name in task_names:
        if name.startswith(prefix):
            return name[len(prefix):]
    return None
