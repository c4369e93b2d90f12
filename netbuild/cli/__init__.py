"""
Click-based command line for netbuild.

    netbuild run                    # the default build
    netbuild run env:test package   # package with the test settings
    netbuild run quick compile:all  # only compile what is out of date
    netbuild list
"""
import logging
import os
import sys

import click

from .context import CLIContext

# Configure logging format
logging.basicConfig(
    level=logging.INFO,
    format='%(message)s'
)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option(
    '-C', '--directory',
    type=click.Path(exists=True, file_okay=False),
    help='Change to DIRECTORY before doing anything',
)
@click.option(
    '--env', 'environment',
    envvar='NETBUILD_ENV',
    help='Environment whose settings are used (default: development)',
)
@click.pass_context
def cli(ctx, verbose, directory, environment):
    """
    netbuild - build orchestration for .NET applications.

    Tasks compile the solution, migrate the database, run the specifications
    and code analysis, and package and deploy the application.
    """
    if directory:
        os.chdir(directory)

    ctx.obj = CLIContext(
        verbose=verbose,
        environment=environment.lower() if environment else None,
    )

    # Configure logging level based on verbosity
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


from .commands import config, list_tasks, prereqs, run

cli.add_command(run)
cli.add_command(list_tasks)
cli.add_command(prereqs)
cli.add_command(config)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except Exception as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
