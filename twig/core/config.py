"""Configuration management for Twig.

This module reads and writes both the repository-local and the global
configuration files, and exposes the handful of settings the object
store and the snapshot builder depend on.
"""

import os
import configparser
from pathlib import Path
from typing import Optional

from .errors import MalformedInputError
from .hash import ALGORITHMS, DEFAULT_ALGORITHM

DEFAULT_IGNORE_FILE = '.gitignore'

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


class Config:
    """
    Manages Twig configuration files.

    Configuration is stored in INI format, like git:
    - Global config: ~/.twigconfig
    - Repository config: .git/config

    Repository config takes precedence over global config.
    Environment variables take highest precedence.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.twigconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        """
        Initialize Config manager.

        Args:
            repo_config_path: Path to repository config file, if in a repo
        """
        self.repo_config_path = repo_config_path
        self._global_config = None
        self._repo_config = None

    @staticmethod
    def _load(path: Path) -> configparser.ConfigParser:
        """
        Parse a config file the way git writes them.

        Repeated keys (the last one wins), keys without a value and literal
        '%' characters are all accepted.

        Raises:
            MalformedInputError: If the file is not INI at all
        """
        parser = configparser.ConfigParser(strict=False, allow_no_value=True, interpolation=None)
        if path.exists():
            try:
                parser.read(path)
            except configparser.Error as e:
                raise MalformedInputError(f"cannot parse config file {path}: {e}") from None
        return parser

    @property
    def global_config(self) -> configparser.ConfigParser:
        """Load and return global configuration."""
        if self._global_config is None:
            self._global_config = self._load(self.GLOBAL_CONFIG_PATH)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        """Load and return repository configuration."""
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = self._load(Path(self.repo_config_path))
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (TWIG_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value

        Args:
            section: Config section (e.g., 'core')
            key: Config key (e.g., 'objectformat')
            fallback: Default value if not found

        Returns:
            Configuration value or fallback
        """
        env_key = f"TWIG_{section.upper()}_{key.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return env_value

        for config in (self.repo_config, self.global_config):
            if config is not None and config.has_option(section, key):
                value = config.get(section, key)
                # A key with no value is git's shorthand for true
                return 'true' if value is None else value

        return fallback

    def get_bool(self, section: str, key: str, fallback: bool = False) -> bool:
        """Get a boolean value; raises MalformedInputError on anything unrecognized."""
        value = self.get(section, key)
        if value is None:
            return fallback
        value = value.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise MalformedInputError(f"{section}.{key} must be a boolean, got '{value}'")

    def get_int(self, section: str, key: str, fallback: int) -> int:
        """Get an integer value; raises MalformedInputError if it does not parse."""
        value = self.get(section, key)
        if value is None:
            return fallback
        try:
            return int(value)
        except ValueError:
            raise MalformedInputError(f"{section}.{key} must be an integer, got '{value}'") from None

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """
        Set a configuration value.

        Args:
            section: Config section
            key: Config key
            value: Value to set
            global_config: If True, write to global config; otherwise repo config
        """
        if global_config:
            config = self.global_config
            config_path = self.GLOBAL_CONFIG_PATH
        else:
            if not self.repo_config_path:
                raise ValueError("No repository config path available")
            config = self.repo_config
            config_path = self.repo_config_path

        if not config.has_section(section):
            config.add_section(section)

        config.set(section, key, value)

        with open(config_path, 'w') as f:
            config.write(f)

    @property
    def object_format(self) -> str:
        """
        Hash algorithm for object addresses.

        Read from core.objectformat, then from git's extensions.objectformat.
        """
        algorithm = (
            self.get('core', 'objectformat')
            or self.get('extensions', 'objectformat')
            or DEFAULT_ALGORITHM
        ).strip().lower()
        if algorithm not in ALGORITHMS:
            raise MalformedInputError(f"core.objectformat '{algorithm}' is not supported")
        return algorithm

    @property
    def compression_level(self) -> int:
        """zlib level used when writing objects (core.compression)."""
        level = self.get_int('core', 'compression', -1)
        if not -1 <= level <= 9:
            raise MalformedInputError(f"core.compression must be between -1 and 9, got {level}")
        return level

    @property
    def preserve_symlinks(self) -> bool:
        """Store symbolic links as links instead of following them (core.symlinks)."""
        return self.get_bool('core', 'symlinks', False)

    @property
    def ignore_filename(self) -> str:
        """Name of the ignore list at the work tree root (core.ignorefile)."""
        return self.get('core', 'ignorefile', DEFAULT_IGNORE_FILE)


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config

    Returns:
        Config instance
    """
    if repo:
        return Config(repo.config_file)
    return Config()
