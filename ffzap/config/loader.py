import yaml
from pathlib import Path
from typing import Optional
from ffzap.domain.errors import ConfigError
from .models import AppConfig

def load_config(config_path: Optional[Path]) -> AppConfig:
    """Loads YAML config and parses it into the AppConfig Pydantic model.

    Without a path the built-in defaults are used. An explicit path that does
    not exist is a configuration error.
    """
    if config_path is None:
        return AppConfig()

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file {config_path} is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping at the top level")

    return AppConfig(**data)
