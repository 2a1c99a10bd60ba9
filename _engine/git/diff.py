from typing import List, Optional

from rich.markup import escape

from animation.Processing import console
from _engine.tokens import split_lines
from _types.errors import DiffSourceError, GitCommandError
from .command import run_git_command


def build_diff_command(commit: Optional[str] = None) -> List[str]:
    """
    Build the ``git diff`` invocation for a commit, a range, or the working tree.

    Args:
        commit (Optional[str]): ``None`` for uncommitted changes, ``"HEAD"``,
                                a single commit, or a range such as ``HEAD~3..HEAD``.

    Returns:
        List[str]: The full argv, starting with ``git``.
    """
    command: List[str] = ["git", "diff"]
    if commit is None:
        return command
    if ".." in commit or commit == "HEAD":
        command.append(commit)
    else:
        # Single commit: compare it with its parent
        command.extend([f"{commit}^", commit])
    return command


def _file_from_header(line: str) -> Optional[str]:
    parts = line.split(" ")
    if len(parts) < 3:
        return None
    path = parts[2]
    return path[2:] if path.startswith("a/") else path


def filter_diff(diff: str) -> str:
    """
    Drop binary notices and whole-file additions/deletions from a unified diff.

    Added and deleted files are listed in a short summary appended to the end
    instead of being sent in full.
    """
    kept: List[str] = []
    new_files: List[str] = []
    deleted_files: List[str] = []
    current_file: Optional[str] = None
    in_new = False
    in_delete = False

    def close_block() -> None:
        if current_file is None:
            return
        if in_new:
            new_files.append(current_file)
        elif in_delete:
            deleted_files.append(current_file)

    for line in split_lines(diff):
        if line.startswith("Binary files"):
            continue

        if line.startswith("diff --git"):
            close_block()
            in_new = False
            in_delete = False
            current_file = _file_from_header(line)
            continue

        if line.startswith("+++ /dev/null"):
            in_delete = True
        elif line.startswith("--- /dev/null"):
            in_new = True

        if not in_new and not in_delete:
            kept.append(line)

    close_block()

    summary = ""
    if new_files:
        summary += "\nNew files:\n" + "".join(f"• {path}\n" for path in new_files)
    if deleted_files:
        summary += "\nDeleted files:\n" + "".join(f"• {path}\n" for path in deleted_files)

    return "\n".join(kept) + summary


def get_diff_from_git(commit: Optional[str] = None) -> str:
    """
    Run ``git diff`` for the given target and return the filtered diff text.

    Raises:
        GitCommandError: If git is missing or exits non-zero.
        DiffSourceError: If the filtered diff is empty.
    """
    command = build_diff_command(commit)
    target = commit if commit else "uncommitted changes"
    console.print(f"[info]Collecting diff for [yellow]{escape(target)}[/yellow]...[/info]")

    returncode, stdout, stderr = run_git_command(command)
    if returncode != 0:
        raise GitCommandError(f"Git command failed: {stderr}")

    filtered = filter_diff(stdout)
    if not filtered.strip():
        raise DiffSourceError("No diff content found")
    return filtered
