from typing import Optional


class MrCommentError(Exception):
    """Base class for every failure the CLI reports and exits on."""


class ConfigError(MrCommentError):
    pass


class DiffSourceError(MrCommentError):
    pass


class GitCommandError(DiffSourceError):
    pass


class TransportError(MrCommentError):
    pass


class ApiRequestError(MrCommentError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, provider_name: str, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider_name} API request failed ({status_code}): {body}")


class ResponseParseError(MrCommentError):
    pass


class EmptyResponseError(ResponseParseError):
    pass


class OutputWriteError(MrCommentError):
    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        message = f"Failed to write to file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
