"""Layered INI settings for toygit.

Lookups go through the environment, then ``.toygit/config``, then
``~/.toygitconfig``. Writes always target exactly one of the two files.
"""

import os
import configparser
from pathlib import Path
from typing import Dict, Optional, Tuple


ENV_PREFIX = 'TOYGIT'


class ConfigFile:
    """One INI file, parsed on first use and rewritten whole on save."""

    def __init__(self, path: Path):
        self.path = path
        self._parser = None

    @property
    def parser(self) -> configparser.ConfigParser:
        if self._parser is None:
            self._parser = configparser.ConfigParser()
            self._parser.read(self.path)
        return self._parser

    def lookup(self, section: str, key: str) -> Optional[str]:
        return self.parser.get(section, key, fallback=None)

    def assign(self, section: str, key: str, value: str) -> None:
        if not self.parser.has_section(section):
            self.parser.add_section(section)
        self.parser.set(section, key, value)
        self.save()

    def remove(self, section: str, key: str) -> bool:
        if not self.parser.has_option(section, key):
            return False
        self.parser.remove_option(section, key)
        if not self.parser.options(section):
            self.parser.remove_section(section)
        self.save()
        return True

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {name: dict(self.parser.items(name)) for name in self.parser.sections()}

    def save(self) -> None:
        with open(self.path, 'w') as f:
            self.parser.write(f)


class Config:
    """
    Settings merged from the environment and two INI files.

    Priority order (highest to lowest):
    1. Environment variables (TOYGIT_<SECTION>_<KEY>)
    2. Repository config (.toygit/config)
    3. Global config (~/.toygitconfig)
    """

    GLOBAL_CONFIG_NAME = '.toygitconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        """
        Args:
            repo_config_path: The repository's config file, or None outside a repository
        """
        self.global_file = ConfigFile(self.global_config_path)
        self.repo_file = ConfigFile(repo_config_path) if repo_config_path else None

    @property
    def global_config_path(self) -> Path:
        return Path.home() / self.GLOBAL_CONFIG_NAME

    def _scope(self, global_config: bool) -> ConfigFile:
        if global_config:
            return self.global_file
        if self.repo_file is None:
            raise ValueError("No repository config path available")
        return self.repo_file

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """Look a value up in priority order, returning fallback when no layer has it."""
        value = os.environ.get(f"{ENV_PREFIX}_{section.upper()}_{key.upper()}")
        if value is not None:
            return value

        for layer in (self.repo_file, self.global_file):
            if layer is not None:
                value = layer.lookup(section, key)
                if value is not None:
                    return value
        return fallback

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """
        Store a value in the repository file, or the global one.

        Raises:
            ValueError: If a repository write is asked for outside a repository
        """
        self._scope(global_config).assign(section, key, value)

    def unset(self, section: str, key: str, global_config: bool = False) -> bool:
        """Remove a value, dropping its section once empty. Returns False if it was absent."""
        if not global_config and self.repo_file is None:
            return False
        return self._scope(global_config).remove(section, key)

    def list_all(self, global_only: bool = False, repo_only: bool = False) -> Dict[str, Dict[str, str]]:
        """Merge both files into ``{section: {key: value}}``, repository values winning."""
        layers = []
        if not repo_only:
            layers.append(self.global_file)
        if not global_only and self.repo_file is not None:
            layers.append(self.repo_file)

        merged: Dict[str, Dict[str, str]] = {}
        for layer in layers:
            for section, values in layer.as_dict().items():
                merged.setdefault(section, {}).update(values)
        return merged

    def get_user_identity(self) -> Tuple[Optional[str], Optional[str]]:
        """Return (user.name, user.email); either may be None."""
        return self.get('user', 'name'), self.get('user', 'email')


def get_config(repo=None) -> Config:
    """Config for repo, or global-only config when repo is None."""
    return Config(repo.config_file if repo else None)


def split_key(key: str) -> Tuple[str, str]:
    """Split ``section.key``; bare keys belong to the core section."""
    section, dot, option = key.partition('.')
    return (section, option) if dot else ('core', key)
