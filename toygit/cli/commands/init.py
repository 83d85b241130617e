"""Initialize a new toygit repository."""

import click
from pathlib import Path

from toygit.core.repository import Repository, RepositoryExistsError
from toygit.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
def init_cmd(path):
    """
    Initialize a new toygit repository.

    Creates a .toygit directory holding the object database and the
    repository configuration.

    Examples:
        toygit init                    # Initialize in current directory
        toygit init my-project         # Initialize in my-project directory
    """
    repo_path = Path(path).resolve()

    try:
        if not repo_path.exists():
            repo_path.mkdir(parents=True)
            click.echo(info(f"Created directory {repo_path}"))

        repo = Repository(str(repo_path))
        repo.init()
    except RepositoryExistsError as e:
        click.echo(error(str(e)))
        click.echo(info("Use an empty directory or different path"))
        raise click.Abort()
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty toygit repository in {repo.toygit_dir}"))
