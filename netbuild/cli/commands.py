"""
Build commands (run, list, prereqs, config).
"""
import click

from netbuild.core.config import default_environment
from netbuild.taskgraph import BuildError
from netbuild.tasks.environment import NAMESPACE, requested_environment

DEFAULT_TASK = "default"


def with_environment(task_names, environment=None):
    """
    Put an ``env:*`` task first so the settings are chosen before any task reads them.

    A requested ``env:*`` task is moved to the front. Otherwise one is added
    for --env, NETBUILD_ENV or development.
    """
    names = list(task_names) or [DEFAULT_TASK]
    requested = requested_environment(names)
    if requested is not None:
        first = f"{NAMESPACE}:{requested}"
        return [first] + [name for name in names if name != first]
    return [f"{NAMESPACE}:{environment or default_environment()}"] + names


def fail(error: Exception):
    click.secho(f"Error: {error}", fg='red', err=True)
    raise click.Abort()


@click.command()
@click.argument('tasks', nargs=-1)
@click.option('--dry-run', is_flag=True, help='Show the tasks that would run without running them')
@click.pass_obj
def run(obj, tasks, dry_run):
    """Run TASKS and their prerequisites (default: the 'default' task)."""
    names = with_environment(tasks, obj.environment)
    executor = obj.executor()

    try:
        result = executor.execute(*names, dry_run=dry_run)
    except BuildError as e:
        fail(e)

    if dry_run:
        return
    click.secho(
        f"Build succeeded: {result.total_tasks} task(s) in {result.execution_time:.2f}s",
        fg='green',
    )


@click.command('list')
@click.option('--all', 'show_all', is_flag=True, help='Include tasks without a description')
@click.pass_obj
def list_tasks(obj, show_all):
    """List the available tasks."""
    tasks = obj.executor().describe(show_all=show_all)
    if not tasks:
        click.echo("No tasks defined.")
        return

    width = max(len(t.name) for t in tasks)
    for t in tasks:
        if t.description:
            click.echo(f"{t.name.ljust(width)}  # {t.description}")
        else:
            click.echo(t.name)


@click.command()
@click.argument('task', required=False)
@click.pass_obj
def prereqs(obj, task):
    """Show the prerequisites of TASK (or of every task)."""
    executor = obj.executor()
    try:
        names = [task] if task else [t.name for t in obj.graph.tasks()]
        for name in names:
            click.echo(name)
            for dependency in executor.prerequisites_of(name):
                click.echo(f"    {dependency}")
    except BuildError as e:
        fail(e)


@click.command()
@click.pass_obj
def config(obj):
    """Print the merged settings for the selected environment."""
    try:
        build = obj.build.configure(obj.environment or default_environment())
    except BuildError as e:
        fail(e)
    click.echo(f"# environment: {build.environment}")
    click.echo(build.config.dump(), nl=False)
