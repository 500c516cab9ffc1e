from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from reqdump.common.paths import get_app_dir
from reqdump.common.yaml_utils import safe_load_with_env

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _check_level(value: str) -> str:
    level = value.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f'Unknown log level {value!r}, expected one of {", ".join(LOG_LEVELS)}')
    return level


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default='INFO', description='Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)')
    console_enabled: bool = Field(default=True, description='Enable console logging')
    file_enabled: bool = Field(default=True, description='Enable file logging')
    log_file_dir: str = Field(default=str(get_app_dir() / 'logs'), description='Log directory (defaults to ~/.reqdump/logs)')
    max_file_size: str = Field(default='10MB', description='Maximum log file size before rotation')
    backup_count: int = Field(default=4, ge=0, description='Number of backup files to keep')

    @field_validator('level')
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return _check_level(value)


class ConfigModel(BaseModel):
    """Configuration model with validation."""

    model_config = ConfigDict(extra='allow')

    version: str = Field(default='1', description='Config version')
    host: str = Field(default='127.0.0.1')
    port: int = Field(default=8000, ge=1, le=65535)
    dev: bool = Field(default=False)
    dump_requests: bool = Field(default=False, description='Log a dump of every inbound request')
    dump_log_level: str = Field(default='DEBUG', description='Level the request dumps are logged at')
    debug_endpoint: bool = Field(default=False, description='Mount /debug/request, which echoes the dump back')
    session_cookie: str = Field(default='session', description='Cookie carrying the session id')
    redact_headers: Optional[List[str]] = Field(default_factory=lambda: ['authorization', 'x-api-key', 'cookie', 'set-cookie'])
    cors_allow_origins: List[str] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description='Logging configuration')

    @field_validator('dump_log_level')
    @classmethod
    def normalize_dump_level(cls, value: str) -> str:
        return _check_level(value)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> 'ConfigModel':
        """Load configuration from YAML file.

        Tries multiple locations in order:
        1. Explicit config_path if provided
        2. ~/.reqdump/config.yaml in user home directory
        3. ./config.yaml in current directory

        Later files override earlier ones; missing files are skipped.
        """
        config_paths = []
        if config_path:
            config_paths.append(config_path)
        else:
            home_config = get_app_dir() / 'config.yaml'
            if home_config.exists():
                config_paths.append(str(home_config))
            config_paths.append('config.yaml')

        data = {}
        for path in config_paths:
            try:
                with open(path, 'r') as f:
                    data.update(safe_load_with_env(f) or {})
            except FileNotFoundError:
                continue
            except yaml.YAMLError as e:
                raise ValueError(f'Invalid YAML in config file {path}: {e}')
            except OSError as e:
                raise ValueError(f'Error reading config file {path}: {e}')

        return cls(**data)

    def save(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        with open(config_path, 'w') as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False, indent=2)
