from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

import main
from _engine.tokens import estimate_tokens, truncate_diff
from tests.helpers import claude_body, make_response, openai_body

POST = "_engine.provider.client.requests.post"
GIT = "_engine.git.command.subprocess.run"


class TestOutputRouting:
    def test_stdout_receives_exactly_the_comment(
        self, diff_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch(POST, return_value=make_response(200, claude_body("## Key Changes\n\n- x"))):
            code = main.main(["--file", str(diff_file), "--api-key", "k"])

        assert code == 0
        assert capsys.readouterr().out == "## Key Changes\n\n- x"

    def test_output_file_receives_comment_and_stdout_stays_empty(
        self, diff_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        target = tmp_path / "mr.md"
        target.write_text("stale content that must be overwritten", encoding="utf-8")

        with patch(POST, return_value=make_response(200, claude_body("fresh"))):
            code = main.main(["-f", str(diff_file), "-k", "k", "-o", str(target)])

        captured = capsys.readouterr()
        assert code == 0
        assert captured.out == ""
        assert "MR comment written to" in captured.err
        assert target.read_text(encoding="utf-8") == "fresh"


class TestProviderSelection:
    def test_claude_is_default(self, diff_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
        with patch(POST, return_value=make_response(200, claude_body("ok"))) as post:
            main.main(["--file", str(diff_file)])

        assert post.call_args.args[0] == "https://api.anthropic.com/v1/messages"
        assert post.call_args.kwargs["headers"]["x-api-key"] == "env-key"

    def test_openai_with_overrides(self, diff_file: Path) -> None:
        with patch(POST, return_value=make_response(200, openai_body("ok"))) as post:
            main.main(
                [
                    "-f", str(diff_file),
                    "-p", "openai",
                    "-k", "sk-flag",
                    "-e", "http://localhost:9000/v1/chat/completions",
                    "-m", "gpt-4o",
                ]
            )

        assert post.call_args.args[0] == "http://localhost:9000/v1/chat/completions"
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-flag"
        assert post.call_args.kwargs["json"]["model"] == "gpt-4o"

    def test_legacy_file_provider_used_without_flag(self, diff_file: Path, isolated_env: Path) -> None:
        (isolated_env / ".mr-comment").write_text(
            json.dumps({"provider": "openai", "openai_api_key": "sk-file"}), encoding="utf-8"
        )
        with patch(POST, return_value=make_response(200, openai_body("ok"))) as post:
            main.main(["--file", str(diff_file)])

        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-file"


    def test_provider_flag_overrides_unknown_provider_in_file(
        self, diff_file: Path, isolated_env: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (isolated_env / ".mr-comment").write_text(json.dumps({"provider": "gemini"}), encoding="utf-8")
        with patch(POST, return_value=make_response(200, openai_body("ok"))) as post:
            code = main.main(["-f", str(diff_file), "-p", "openai", "-k", "sk-flag"])

        captured = capsys.readouterr()
        assert code == 0
        assert captured.out == "ok"
        assert post.call_args.args[0] == "https://api.openai.com/v1/chat/completions"
        assert "Ignoring unknown provider" in captured.err


class TestDebugMode:
    def test_prints_estimate_without_network(
        self, diff_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch(POST) as post:
            code = main.main(["--file", str(diff_file), "--debug"])

        out = capsys.readouterr().out
        assert code == 0
        post.assert_not_called()
        assert out.startswith("Token estimation:\n")
        assert "- System prompt:" in out
        assert "- Diff content:" in out
        assert "- Total estimate:" in out
        assert "Claude's limit: 200,000 tokens" in out

    def test_uses_tighter_cap_than_request(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        diff = "".join(f"+line {i:05d}\n" for i in range(6000))
        path = tmp_path / "big.diff"
        path.write_text(diff, encoding="utf-8")
        debug_truncated, _ = truncate_diff(diff, max_lines=4000)
        request_truncated, _ = truncate_diff(diff)

        with patch(POST) as post:
            main.main(["--file", str(path), "--debug"])

        out = capsys.readouterr().out
        post.assert_not_called()
        assert f"- Diff content: {estimate_tokens(debug_truncated)} tokens (6000 lines)" in out
        assert estimate_tokens(debug_truncated) < estimate_tokens(request_truncated)


class TestFailures:
    def test_missing_key_fails_before_network(self, diff_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with patch(POST) as post, pytest.raises(SystemExit) as excinfo:
            with patch("sys.argv", ["mr-comment", "--file", str(diff_file)]):
                main.run()

        assert excinfo.value.code == 1
        post.assert_not_called()
        assert "API key is required" in capsys.readouterr().err

    def test_http_error_exits_non_zero_with_body(
        self, diff_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch(POST, return_value=make_response(500, text="upstream exploded")):
            with patch("sys.argv", ["mr-comment", "-f", str(diff_file), "-k", "k"]):
                with pytest.raises(SystemExit) as excinfo:
                    main.run()

        captured = capsys.readouterr()
        assert excinfo.value.code == 1
        assert captured.out == ""
        assert "upstream exploded" in captured.err

    def test_git_failure_exits_non_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        failure = subprocess.CompletedProcess(args=["git"], returncode=128, stdout="", stderr="not a git repository")
        with patch(GIT, return_value=failure), patch(POST) as post:
            with patch("sys.argv", ["mr-comment", "-k", "k"]):
                with pytest.raises(SystemExit) as excinfo:
                    main.run()

        assert excinfo.value.code == 1
        post.assert_not_called()
        assert "not a git repository" in capsys.readouterr().err

    def test_unexpected_error_shows_fatal_panel(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("main.main", side_effect=BrokenPipeError("Broken pipe")):
            with pytest.raises(SystemExit) as excinfo:
                main.run()

        err = capsys.readouterr().err
        assert excinfo.value.code == 1
        assert "Fatal Error" in err
        assert "Broken pipe" in err

    def test_unknown_provider_in_file_fails_without_flag(
        self, diff_file: Path, isolated_env: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (isolated_env / ".mr-comment").write_text(json.dumps({"provider": "gemini"}), encoding="utf-8")
        with patch(POST) as post, patch("sys.argv", ["mr-comment", "-f", str(diff_file), "-k", "k"]):
            with pytest.raises(SystemExit) as excinfo:
                main.run()

        assert excinfo.value.code == 1
        post.assert_not_called()
        assert "Invalid provider" in capsys.readouterr().err

    def test_file_and_commit_are_mutually_exclusive(self, diff_file: Path) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main.main(["--file", str(diff_file), "--commit", "HEAD"])

        assert excinfo.value.code == 2


class TestCommitSelection:
    def test_range_passed_to_git(self, sample_diff: str) -> None:
        ok = subprocess.CompletedProcess(args=["git"], returncode=0, stdout=sample_diff, stderr="")
        with patch(GIT, return_value=ok) as run, patch(POST, return_value=make_response(200, claude_body("ok"))):
            main.main(["--commit", "main..feature", "-k", "k"])

        assert run.call_args.args[0] == ["git", "diff", "main..feature"]


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == "mr-comment 0.1.0"
