import subprocess
from typing import List, Tuple

from _types.errors import GitCommandError


def run_git_command(command: List[str]) -> Tuple[int, str, str]:
    """
    Runs a git command and returns its return code, stdout, and stderr.

    Args:
        command (List[str]): The git command and its arguments as a list of strings.
                             Example: ["git", "diff", "HEAD~3..HEAD"]

    Returns:
        Tuple[int, str, str]: The command's return code, stdout and stderr
                              (both decoded as UTF-8 and stripped).

    Raises:
        GitCommandError: If git is not installed or cannot be started.
    """
    try:
        # errors="replace" keeps a diff of a mis-encoded file from aborting the run
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as e:
        raise GitCommandError(
            "Git command not found. Is Git installed and in your PATH?"
        ) from e
    except OSError as e:
        raise GitCommandError(f"Failed to execute git command {' '.join(command)}: {e}") from e

    return result.returncode, result.stdout.strip(), result.stderr.strip()
