"""Settings for a git-goclone run.

Values come from built-in defaults, then an optional YAML file, then command
line options. The file is looked up in this order:

1. the path passed with ``--config``
2. ``$GOCLONE_CONFIG``
3. ``.goclone.yml`` in the working directory, if it exists

Example::

    timeout: 600
    depth: 1
    progress: false
    color: true
"""
import math
import os
import sys
from dataclasses import dataclass, field, fields, replace

import yaml

from .errors import ConfigError
from .processor import CLONE_DEPTH, CLONE_TIMEOUT, MAX_TIMEOUT

CONFIG_FILE = ".goclone.yml"
CONFIG_ENV = "GOCLONE_CONFIG"


def _stderr_is_tty():
    return sys.stderr.isatty()


@dataclass(frozen=True)
class Config:
    timeout: float = CLONE_TIMEOUT
    depth: int = CLONE_DEPTH
    progress: bool = True
    color: bool = field(default_factory=_stderr_is_tty)

    def merge(self, **overrides):
        """Return a copy with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _validate(data, source):
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a mapping at the top level")

    if not all(isinstance(key, str) for key in data):
        raise ConfigError(f"{source}: keys must be strings")

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown keys: {', '.join(unknown)}")

    timeout = data.get("timeout")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"{source}: timeout must be a positive number of seconds")
        if not math.isfinite(timeout) or timeout > MAX_TIMEOUT:
            raise ConfigError(f"{source}: timeout must be at most {MAX_TIMEOUT} seconds")

    depth = data.get("depth")
    if depth is not None:
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            raise ConfigError(f"{source}: depth must be a non-negative integer")

    for key in ("progress", "color"):
        if key in data and not isinstance(data[key], bool):
            raise ConfigError(f"{source}: {key} must be true or false")

    return data


def find_config_file(path=None):
    if path:
        return path
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return env_path
    if os.path.exists(CONFIG_FILE):
        return CONFIG_FILE
    return None


def load_config(path=None):
    """Load a Config, reading the YAML file if one is found."""
    config_path = find_config_file(path)
    if config_path is None:
        return Config()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read {config_path}: {e.strerror}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {config_path}: {e}") from e

    if data is None:
        return Config()
    return Config().merge(**_validate(data, config_path))
