import json
import os
from pathlib import Path
from typing import Mapping, Optional, Union

from pydantic import ValidationError
from rich.markup import escape

from animation.Processing import console
from _data.providers import LEGACY_CONFIG_FILENAME
from _types.errors import ConfigError
from _types.model import Config, LegacyConfig, Provider


def default_config_path() -> Path:
    return Path.home() / LEGACY_CONFIG_FILENAME


def load_config_file(path: Optional[Union[str, Path]] = None) -> LegacyConfig:
    """
    Load the legacy ``~/.mr-comment`` JSON file.

    A missing file is not an error and yields an empty configuration.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        return LegacyConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse config file: {config_path} ({e})") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {config_path} ({e})") from e

    try:
        return LegacyConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file: {config_path} ({e})") from e


def resolve_config(
    provider: Provider,
    api_key: Optional[str] = None,
    endpoint: Optional[str] = None,
    model: Optional[str] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    file_config: Optional[LegacyConfig] = None,
    require_api_key: bool = True,
) -> Config:
    """
    Collapse flags, environment and the legacy file into one immutable Config.

    Precedence for every field: explicit argument > environment variable
    (API key only) > legacy config file > provider default.

    Raises:
        ConfigError: If ``require_api_key`` is set and no key was found.
    """
    env = os.environ if env is None else env
    file_config = file_config or LegacyConfig()

    resolved_key = api_key or env.get(provider.key_env_var) or file_config.api_key_for(provider)
    if require_api_key and not resolved_key:
        raise ConfigError(
            "API key is required. Provide it with --api-key or set "
            f"{provider.key_env_var} environment variable"
        )

    return Config(
        provider=provider,
        api_key=resolved_key or None,
        endpoint=endpoint or file_config.endpoint_for(provider) or provider.default_endpoint,
        model=model or file_config.model_for(provider) or provider.default_model,
    )


def resolve_provider(flag: Optional[str], file_config: LegacyConfig) -> Provider:
    """
    Pick the provider: ``--provider`` first, then the legacy file, then Claude.

    An unknown provider in the file only matters when no flag overrides it.

    Raises:
        ConfigError: If the file's provider is used and is not a known one.
    """
    stored = file_config.provider
    if flag is not None:
        if stored is not None and stored not in {p.value for p in Provider}:
            console.print(
                f"[warning]Ignoring unknown provider '{escape(stored)}' in {default_config_path()}[/warning]"
            )
        return Provider(flag)

    if stored is None:
        return Provider.CLAUDE
    try:
        return Provider(stored)
    except ValueError as e:
        raise ConfigError(
            f"Invalid provider '{stored}' in config file: expected one of "
            f"{', '.join(p.value for p in Provider)}"
        ) from e
