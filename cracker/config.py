'''
Run configuration for the dictionary cracker.

Defaults live in DEFAULTS; a YAML file (see config.example.yaml) may override
any of them, and command-line flags override the file.
'''

from pathlib import Path

from cracker.fileio import FileIO
from md5crypt.password import PW_LIMIT


DICTIONARY_LIMIT = 1000     # maximum number of words in the dictionary
USERNAME_LIMIT = 32         # maximum username length in the shadow file

ON_ERROR_MODES = ('abort', 'skip')

DEFAULTS = {
    'dictionary_limit': DICTIONARY_LIMIT,
    'password_limit': PW_LIMIT,
    'username_limit': USERNAME_LIMIT,
    'on_error': 'abort',
    'workers': 1,
    'progress': True,
    'report': None,
    'require_file_hints': False,
}


class ConfigError(ValueError):
    '''invalid configuration file or value'''


def validate(config: dict) -> dict:
    '''
    Check types and ranges of a merged configuration.

    Returns the same dict for chaining; raises ConfigError on the first bad key.
    '''
    unknown = set(config) - set(DEFAULTS)
    if unknown:
        raise ConfigError(f'unknown config keys: {", ".join(sorted(unknown))}')

    for key in ('dictionary_limit', 'password_limit', 'username_limit', 'workers'):
        value = config[key]
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ConfigError(f'{key} must be a positive integer, got {value!r}')

    if config['password_limit'] > PW_LIMIT:
        raise ConfigError(f'password_limit cannot exceed {PW_LIMIT}')

    if config['on_error'] not in ON_ERROR_MODES:
        raise ConfigError(f'on_error must be one of {ON_ERROR_MODES}, got {config["on_error"]!r}')

    for key in ('progress', 'require_file_hints'):
        if not isinstance(config[key], bool):
            raise ConfigError(f'{key} must be true or false, got {config[key]!r}')

    if config['report'] is not None and not isinstance(config['report'], (str, Path)):
        raise ConfigError(f'report must be a path, got {config["report"]!r}')

    return config


def load_config(path: str | Path | None = None, **overrides) -> dict:
    '''
    Build the run configuration.

    Parameters:
    -----------
    path : str | Path | None
        Optional YAML file with a top-level mapping of settings.

    **overrides
        Settings that take precedence over the file; None values are ignored.

    Returns:
    --------
    dict
        Validated configuration with every key of DEFAULTS present.
    '''
    config = dict(DEFAULTS)

    if path is not None:
        try:
            data = FileIO.load_yaml(path)
        except UnicodeDecodeError:
            raise ConfigError(f'{path}: not valid UTF-8') from None
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f'{path}: expected a mapping at the top level, got {type(data).__name__}')
        config.update(data)

    config.update({k: v for k, v in overrides.items() if v is not None})
    return validate(config)
