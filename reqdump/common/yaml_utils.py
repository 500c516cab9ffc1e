"""YAML loading for configuration files with ``!env`` tag support."""

import os
from typing import Any

import yaml


class EnvSafeLoader(yaml.SafeLoader):
    """SafeLoader that resolves ``!env`` tags from the process environment."""


def _env_name(loader: EnvSafeLoader, node: yaml.Node, value: Any) -> str:
    if not isinstance(value, str):
        raise yaml.constructor.ConstructorError(None, None, f'Environment variable name must be a string, got {type(value).__name__}', node.start_mark)
    return value


def _env_constructor(loader: EnvSafeLoader, node: yaml.Node) -> Any:
    """Resolve ``!env VAR`` (required) or ``!env [VAR, default]`` (optional).

    Raises:
        ValueError: If a required environment variable is not set.
        yaml.constructor.ConstructorError: If the tag is applied to anything else.
    """
    if isinstance(node, yaml.ScalarNode):
        var_name = _env_name(loader, node, loader.construct_scalar(node))
        value = os.getenv(var_name)
        if value is None:
            raise ValueError(f"Required environment variable '{var_name}' is not set")
        return value

    if isinstance(node, yaml.SequenceNode):
        values = loader.construct_sequence(node)
        if len(values) != 2:
            raise yaml.constructor.ConstructorError(None, None, f'!env sequence must have exactly 2 elements [var_name, default], got {len(values)}', node.start_mark)
        var_name = _env_name(loader, node, values[0])
        return os.getenv(var_name, values[1])

    raise yaml.constructor.ConstructorError(None, None, f'!env tag expects scalar (var_name) or sequence ([var_name, default]), got {type(node).__name__}', node.start_mark)


EnvSafeLoader.add_constructor('!env', _env_constructor)


def safe_load_with_env(stream) -> Any:
    """Like ``yaml.safe_load`` but resolving ``!env`` tags."""
    return yaml.load(stream, Loader=EnvSafeLoader)


__all__ = ['EnvSafeLoader', 'safe_load_with_env']
