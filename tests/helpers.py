from __future__ import annotations

import json
from typing import Any, Optional

import requests


def make_response(status_code: int = 200, json_data: Any = None, text: Optional[str] = None) -> requests.Response:
    """Build a real ``requests.Response`` carrying a JSON or raw text body."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if json_data is not None:
        body = json.dumps(json_data)
    else:
        body = text or ""
    response._content = body.encode("utf-8")
    return response


def openai_body(content: str) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def claude_body(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}
