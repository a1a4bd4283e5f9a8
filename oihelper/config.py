import collections.abc
import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .errors import OIHelperError


class ConfigError(OIHelperError):
    pass


CONFIG_FILE = 'oihelper.yaml'

SOURCE_EXTENSIONS = ('.cpp', '.cc', '.cxx')


def load_config(configuration_file: str = CONFIG_FILE, priority_dirs: list[Path] = []) -> dict:
    """Load an oihelper configuration file.

    Args:
        configuration_file (str): name of configuration file.  Name is
        relative to config directory so typically just a file name
        without paths, e.g. "oihelper.yaml".
        priority_dirs (list of Path): extra directories searched after
        the standard ones, e.g. the workspace directory.
    """
    res: dict | None = None

    for dirname in __config_file_paths() + priority_dirs:
        path = Path(dirname) / configuration_file
        new_config = None
        if path.is_file():
            try:
                with open(path, 'r', encoding='utf-8') as config:
                    new_config = yaml.safe_load(config.read())
            except yaml.YAMLError as err:
                raise ConfigError(f'Config file {path}: failed to parse: {err}')
            if new_config is not None and not isinstance(new_config, collections.abc.Mapping):
                raise ConfigError(f'Config file {path}: expected a mapping at top level')
        if res is None:
            if new_config is None:
                raise ConfigError(f'Base configuration file {configuration_file} not found in {path}')
            res = new_config
        elif new_config is not None:
            __update_dict(res, new_config)

    assert res is not None, 'Failed to load config (should never happen, we should have hit an error in loop above)'
    return res


def __config_file_paths() -> list[Path]:
    """
    Paths in which to look for config files, by increasing order of
    priority (i.e., any config in the last path should take precedence
    over the others).
    """
    return [
        Path(__file__).parent / 'config',
        Path('/etc/oihelper'),
        Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config')) / 'oihelper',
    ]


def __update_dict(orig: dict, update: Mapping) -> None:
    """Deep update of a dictionary

    For each entry (k, v) in update such that both orig[k] and v are
    dictionaries, orig[k] is recurisvely updated to v.

    For all other entries (k, v), orig[k] is set to v.
    """
    for key, value in update.items():
        if key in orig and isinstance(value, collections.abc.Mapping) and isinstance(orig[key], collections.abc.Mapping):
            __update_dict(orig[key], value)
        else:
            orig[key] = value


@dataclass(frozen=True)
class CompilerConfig:
    """How to turn a C++ source file into an executable."""

    cc_compiler: str = 'g++'
    cc_flags: str = ''
    cc_default_extension: str = 'cc'

    __KEYS = ('cc_compiler', 'cc_flags', 'cc_default_extension')

    @classmethod
    def from_dict(cls, values: Mapping) -> 'CompilerConfig':
        for unknown in set(values) - set(cls.__KEYS):
            raise ConfigError(f'Unknown key "{unknown}" in compiler configuration')
        for key, value in values.items():
            if not isinstance(value, str):
                raise ConfigError(f'Compiler configuration: {key} must be string but is {type(value)}.')
        if not values.get('cc_compiler', cls.cc_compiler):
            raise ConfigError('Compiler configuration: cc_compiler must not be empty')
        return cls(**values)

    def source_path(self, name: str) -> str:
        """Source file name for a target, adding the default extension
        unless the name already carries a C++ one."""
        if name.endswith(SOURCE_EXTENSIONS):
            return name
        return f'{name}.{self.cc_default_extension}'


def executable_path(source: str) -> str:
    """The executable built from a source file: its path minus the final
    extension segment."""
    return os.path.splitext(source)[0]


def get_compiler_config(conf: Mapping) -> CompilerConfig:
    return CompilerConfig.from_dict(conf.get('compiler') or {})
