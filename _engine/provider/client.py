from typing import Any, Callable, Dict

import requests
from pydantic import ValidationError

from animation.Processing import console, spinner
from _types.errors import (
    ApiRequestError,
    EmptyResponseError,
    ResponseParseError,
    TransportError,
)
from _types.model import ClaudeResponse, Config, OpenAIResponse, Provider, ProviderRequest
from .request import build_request


def send_request(provider: Provider, request: ProviderRequest) -> Dict[str, Any]:
    """
    POST the request once and return the decoded JSON body.

    Raises:
        TransportError: If the connection fails.
        ApiRequestError: If the server answers with a non-success status.
        ResponseParseError: If the body is not JSON.
    """
    name = provider.display_name
    try:
        response = requests.post(request.url, json=request.payload, headers=request.headers)
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Failed to call {name} API: {e}") from e

    if not 200 <= response.status_code < 300:
        error_text = response.text or "Could not read error response"
        raise ApiRequestError(name, response.status_code, error_text)

    try:
        return response.json()
    except ValueError as e:
        raise ResponseParseError(f"Failed to parse {name} API response: {e}") from e


def extract_openai_text(data: Dict[str, Any]) -> str:
    try:
        parsed = OpenAIResponse.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(f"Failed to parse OpenAI API response: {e}") from e

    if not parsed.choices:
        raise EmptyResponseError("OpenAI API response contained no choices")
    return parsed.choices[0].message.content


def extract_claude_text(data: Dict[str, Any]) -> str:
    try:
        parsed = ClaudeResponse.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(f"Failed to parse Claude API response: {e}") from e

    if not parsed.content:
        raise EmptyResponseError("Claude API response contained no content")
    for block in parsed.content:
        if block.content_type == "text" and block.text is not None:
            return block.text
    raise EmptyResponseError("Claude API response contained no text content")


TEXT_EXTRACTORS: Dict[Provider, Callable[[Dict[str, Any]], str]] = {
    Provider.OPENAI: extract_openai_text,
    Provider.CLAUDE: extract_claude_text,
}


def extract_text(provider: Provider, data: Dict[str, Any]) -> str:
    if not isinstance(data, dict):
        raise ResponseParseError(
            f"Failed to parse {provider.display_name} API response: expected a JSON object"
        )
    return TEXT_EXTRACTORS[provider](data)


def generate_mr_comment(config: Config, diff: str) -> str:
    """Turn a diff into an MR comment with one call to the configured provider."""
    request = build_request(config, diff)
    console.print(
        f"[info]Requesting MR comment from [highlight]{config.provider.display_name}[/highlight] "
        f"([cyan]{config.model}[/cyan])[/info]"
    )
    with spinner(f"Waiting for {config.provider.display_name} ({config.model})..."):
        data = send_request(config.provider, request)
    return extract_text(config.provider, data)
