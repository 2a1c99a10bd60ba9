import math
from typing import List, Tuple

from _data.prompt import SYSTEM_PROMPT, TRUNCATION_MARKER
from _data.providers import CHARS_PER_TOKEN, MAX_DIFF_LINES
from _types.model import TokenEstimate


def split_lines(text: str) -> List[str]:
    """Split on line feeds only. A trailing line feed does not start an extra line."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def truncate_diff(diff: str, max_lines: int = MAX_DIFF_LINES) -> Tuple[str, int]:
    """
    Bound a diff to roughly ``max_lines`` lines.

    The beginning and end of a diff carry most of the context, so the first
    and last ``max_lines // 2`` lines are kept around a marker line.

    Returns:
        Tuple[str, int]: The (possibly) truncated diff and the original line count.
    """
    lines = split_lines(diff)
    original_len = len(lines)
    if original_len <= max_lines:
        return diff, original_len

    half = max_lines // 2
    head = lines[:half]
    tail = lines[original_len - half:] if half else []
    truncated = "\n".join(head) + f"\n{TRUNCATION_MARKER}\n" + "\n".join(tail)
    return truncated, original_len


def estimate_tokens(text: str) -> int:
    """Conservative token count: one token per 3.5 characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_request(diff: str, max_lines: int = MAX_DIFF_LINES) -> TokenEstimate:
    truncated, original_len = truncate_diff(diff, max_lines)
    return TokenEstimate(
        system_tokens=estimate_tokens(SYSTEM_PROMPT),
        diff_tokens=estimate_tokens(truncated),
        diff_lines=original_len,
    )
