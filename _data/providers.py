VERSION: str = "0.1.0"

OPENAI_ENDPOINT: str = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL: str = "gpt-4-turbo"
OPENAI_KEY_ENV: str = "OPENAI_API_KEY"

CLAUDE_ENDPOINT: str = "https://api.anthropic.com/v1/messages"
CLAUDE_MODEL: str = "claude-3-7-sonnet-20250219"
CLAUDE_KEY_ENV: str = "ANTHROPIC_API_KEY"
ANTHROPIC_VERSION: str = "2023-06-01"

TEMPERATURE: float = 0.7
CLAUDE_MAX_TOKENS: int = 4000

# Keep the first and last half of this many lines when the diff is longer
MAX_DIFF_LINES: int = 10000
# --debug reports against a tighter cap than the real request
DEBUG_MAX_DIFF_LINES: int = 4000
# Rough chars-per-token ratio; Claude is ~4, OpenAI ~3.5
CHARS_PER_TOKEN: float = 3.5
CLAUDE_CONTEXT_LIMIT: int = 200_000

LEGACY_CONFIG_FILENAME: str = ".mr-comment"
