"""Config command - manage repository configuration."""

import click

from toygit.core.repository import Repository
from toygit.core.config import Config, get_config, split_key
from toygit.cli.output import success, error, info


def _load_config(is_global: bool) -> Config:
    if is_global:
        return Config()

    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a toygit repository (use --global for global config)"))
        raise click.Abort()
    return get_config(repo)


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""
    pass


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        toygit config set user.name "Your Name"
        toygit config set --global user.email "you@example.com"
    """
    config = _load_config(is_global)
    section, option = split_key(key)
    config.set(section, option, value, global_config=is_global)

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Get global config only')
def config_get(key, is_global):
    """
    Get a config value.

    Examples:
        toygit config get user.name
    """
    if is_global:
        config = Config()
    else:
        repo = Repository.find_repository()
        config = get_config(repo)

    section, option = split_key(key)
    value = config.get(section, option)
    if value is None:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(value)


@config_cmd.command('unset')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Unset global config')
def config_unset(key, is_global):
    """Remove a config value."""
    config = _load_config(is_global)
    section, option = split_key(key)

    if not config.unset(section, option, global_config=is_global):
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(success(f"Removed {key}"))


@config_cmd.command('list')
@click.option('--global', 'is_global', is_flag=True, help='List global config only')
def config_list(is_global):
    """
    List all config values.

    Examples:
        toygit config list
        toygit config list --global
    """
    if is_global:
        values = Config().list_all(global_only=True)
    else:
        values = get_config(Repository.find_repository()).list_all()

    if not values:
        click.echo(info("No configuration set"))
        return

    for section, options in values.items():
        for key, value in options.items():
            click.echo(f"{section}.{key}={value}")
