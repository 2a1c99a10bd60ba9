PURPOSE: str = "Create standard gitlab MR comment"

INSTRUCTIONS: str = """\
Carefully review the git-log previously provided and then Generate a concise, professional MR comment based on that git log. Use a structured format that includes
 •\tMR Title:
 A short 1 sentence summary for use in a gitlab MR title [dont include the title header]
 •\tMR Summary:
 A brief overview of the changes. [dont include the summary header]
 •\t## Key Changes:
 A bulleted list of major updates or improvements.
 •\t## Why These Changes:
 A short explanation of the motivation behind the changes.
 •\t## Review Checklist:
 A list of items for reviewers to verify. Use a markdown checkbox for each item
 •\t## Notes:
 Additional context or guidance.
 Follow the style of simplifying technical details while maintaining clarity and professionalism. ALWAYS add a blank line after each heading.

 ONLY produce the MR comment and no additional questions or prompts. The git diff may be truncated due to length - focus analysis on the provided sections."""

SYSTEM_PROMPT: str = f"{PURPOSE}\n\n{INSTRUCTIONS}"

TRUNCATION_MARKER: str = "[...diff truncated...]"


def build_user_message(diff: str, original_lines: int, truncated: bool) -> str:
    """Wrap the (possibly truncated) diff in the user turn sent to the model."""
    warning = f" (truncated from {original_lines} lines)" if truncated else ""
    return f"Git diff{warning}:\n\n{diff}"
