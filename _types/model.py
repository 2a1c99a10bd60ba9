from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from _data.providers import (
    CLAUDE_ENDPOINT,
    CLAUDE_KEY_ENV,
    CLAUDE_MODEL,
    OPENAI_ENDPOINT,
    OPENAI_KEY_ENV,
    OPENAI_MODEL,
)


class Provider(str, Enum):
    """Text-generation API vendor, with the defaults each one ships with."""

    OPENAI = "openai"
    CLAUDE = "claude"

    @property
    def display_name(self) -> str:
        return "OpenAI" if self is Provider.OPENAI else "Claude"

    @property
    def default_endpoint(self) -> str:
        return OPENAI_ENDPOINT if self is Provider.OPENAI else CLAUDE_ENDPOINT

    @property
    def default_model(self) -> str:
        return OPENAI_MODEL if self is Provider.OPENAI else CLAUDE_MODEL

    @property
    def key_env_var(self) -> str:
        return OPENAI_KEY_ENV if self is Provider.OPENAI else CLAUDE_KEY_ENV


class Config(BaseModel):
    """Fully resolved settings for one run. Built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    api_key: Optional[str]
    endpoint: str
    model: str


class LegacyConfig(BaseModel):
    """Contents of the old ``~/.mr-comment`` file. Read, never written."""

    openai_api_key: Optional[str] = None
    claude_api_key: Optional[str] = None
    openai_endpoint: Optional[str] = None
    claude_endpoint: Optional[str] = None
    openai_model: Optional[str] = None
    claude_model: Optional[str] = None
    # Kept as text so a stale value cannot block a run that passes --provider
    provider: Optional[str] = None

    def api_key_for(self, provider: Provider) -> Optional[str]:
        return self.openai_api_key if provider is Provider.OPENAI else self.claude_api_key

    def endpoint_for(self, provider: Provider) -> Optional[str]:
        return self.openai_endpoint if provider is Provider.OPENAI else self.claude_endpoint

    def model_for(self, provider: Provider) -> Optional[str]:
        return self.openai_model if provider is Provider.OPENAI else self.claude_model


class OpenAIMessage(BaseModel):
    content: str


class OpenAIChoice(BaseModel):
    message: OpenAIMessage


class OpenAIResponse(BaseModel):
    choices: List[OpenAIChoice]


class ClaudeContent(BaseModel):
    content_type: str = Field(alias="type")
    text: Optional[str] = None


class ClaudeResponse(BaseModel):
    content: List[ClaudeContent]


class TokenEstimate(BaseModel):
    system_tokens: int
    diff_tokens: int
    diff_lines: int

    @property
    def total(self) -> int:
        return self.system_tokens + self.diff_tokens


class ProviderRequest(BaseModel):
    """Everything needed to issue the single POST to a provider."""

    url: str
    headers: Dict[str, str]
    payload: Dict[str, Any]
