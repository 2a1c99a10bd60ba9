from typing import Any, Callable, Dict

from _data.prompt import SYSTEM_PROMPT, build_user_message
from _data.providers import ANTHROPIC_VERSION, CLAUDE_MAX_TOKENS, MAX_DIFF_LINES, TEMPERATURE
from _types.errors import ConfigError
from _types.model import Config, Provider, ProviderRequest
from _engine.tokens import truncate_diff


def _openai_request(config: Config, user_message: str) -> ProviderRequest:
    payload: Dict[str, Any] = {
        "model": config.model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_message},
        ],
        "temperature": TEMPERATURE,
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_key}",
    }
    return ProviderRequest(url=config.endpoint, headers=headers, payload=payload)


def _claude_request(config: Config, user_message: str) -> ProviderRequest:
    payload: Dict[str, Any] = {
        "model": config.model,
        "system": SYSTEM_PROMPT,
        "messages": [
            {"role": "user", "content": user_message},
        ],
        "temperature": TEMPERATURE,
        "max_tokens": CLAUDE_MAX_TOKENS,
    }
    headers = {
        "Content-Type": "application/json",
        "x-api-key": config.api_key or "",
        "anthropic-version": ANTHROPIC_VERSION,
    }
    return ProviderRequest(url=config.endpoint, headers=headers, payload=payload)


REQUEST_BUILDERS: Dict[Provider, Callable[[Config, str], ProviderRequest]] = {
    Provider.OPENAI: _openai_request,
    Provider.CLAUDE: _claude_request,
}


def build_request(config: Config, diff: str) -> ProviderRequest:
    """
    Build the provider-specific request for a diff.

    The diff is truncated first; when that happens the user message says how
    many lines the original had.
    """
    if not config.api_key:
        raise ConfigError(
            "API key is required. Provide it with --api-key or set "
            f"{config.provider.key_env_var} environment variable"
        )

    truncated_diff, original_len = truncate_diff(diff)
    user_message = build_user_message(
        truncated_diff, original_len, truncated=original_len > MAX_DIFF_LINES
    )
    return REQUEST_BUILDERS[config.provider](config, user_message)
