from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from _types.model import Config, Provider

SAMPLE_DIFF = """\
diff --git a/main.py b/main.py
index e29d86d..92d59ef 100644
--- a/main.py
+++ b/main.py
@@ -1,3 +1,4 @@
 import sys
+import argparse
 
 def main():
"""


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point HOME at an empty directory and drop provider keys from the env.

    Keeps a developer's real ``~/.mr-comment`` and exported keys out of tests.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    yield home


@pytest.fixture
def sample_diff() -> str:
    return SAMPLE_DIFF


@pytest.fixture
def diff_file(tmp_path: Path, sample_diff: str) -> Path:
    path = tmp_path / "changes.diff"
    path.write_text(sample_diff, encoding="utf-8")
    return path


@pytest.fixture
def openai_config() -> Config:
    return Config(
        provider=Provider.OPENAI,
        api_key="sk-test",
        endpoint=Provider.OPENAI.default_endpoint,
        model=Provider.OPENAI.default_model,
    )


@pytest.fixture
def claude_config() -> Config:
    return Config(
        provider=Provider.CLAUDE,
        api_key="sk-ant-test",
        endpoint=Provider.CLAUDE.default_endpoint,
        model=Provider.CLAUDE.default_model,
    )
