# Standard Library Imports
import sys
import argparse
from typing import List, Optional

# Third-Party Library Imports
from rich.markup import escape
from rich.panel import Panel

# Internal Module Imports
from animation.Processing import console
from _data.providers import CLAUDE_CONTEXT_LIMIT, DEBUG_MAX_DIFF_LINES, VERSION
from _engine.config import load_config_file, resolve_config, resolve_provider
from _engine.git import load_diff, write_output
from _engine.provider import generate_mr_comment
from _engine.tokens import estimate_request
from _types.errors import MrCommentError
from _types.model import Provider

EPILOG = """\
Examples:
  # Generate comment using Claude (default)
  mr-comment --api-key YOUR_API_KEY

  # Generate comment using OpenAI
  mr-comment --provider openai --api-key YOUR_OPENAI_KEY

  # Generate comment for a specific commit
  mr-comment --commit a1b2c3d

  # Generate comment for a range of commits
  mr-comment --commit "HEAD~3..HEAD"

  # Read diff from file
  mr-comment --file path/to/diff.txt

  # Write output to file
  mr-comment --output mr-comment.md

  # Use a different model
  mr-comment --provider claude --model claude-3-haiku-20240307
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mr-comment",
        description="Generate professional GitLab MR comments from git diffs using AI",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-c",
        "--commit",
        help='Commit or range to generate comment for (e.g. "HEAD" or "HEAD~3..HEAD").',
        type=str,
    )
    source.add_argument(
        "-f",
        "--file",
        help="Read diff from file instead of git command. Cannot be used with --commit.",
        type=str,
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write output to file instead of stdout. Overwrites an existing file.",
        type=str,
    )
    parser.add_argument(
        "-k",
        "--api-key",
        dest="api_key",
        help="API key (can also use OPENAI_API_KEY or ANTHROPIC_API_KEY env var).",
        type=str,
    )
    parser.add_argument(
        "-p",
        "--provider",
        choices=[p.value for p in Provider],
        metavar="PROVIDER",
        help="API provider to use: openai or claude. Default: claude",
    )
    parser.add_argument(
        "-e",
        "--endpoint",
        help="API endpoint (defaults based on provider).",
        type=str,
    )
    parser.add_argument(
        "-m",
        "--model",
        help="Model to use (defaults based on provider).",
        type=str,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode - estimate token usage and exit.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )
    return parser


def print_token_estimate(diff: str) -> None:
    estimate = estimate_request(diff, max_lines=DEBUG_MAX_DIFF_LINES)
    print("Token estimation:")
    print(f"- System prompt: {estimate.system_tokens} tokens")
    print(f"- Diff content: {estimate.diff_tokens} tokens ({estimate.diff_lines} lines)")
    print(f"- Total estimate: {estimate.total} tokens")
    print(f"Claude's limit: {CLAUDE_CONTEXT_LIMIT:,} tokens")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, resolve configuration, collect the diff and emit the
    generated MR comment. Returns the process exit code.
    """
    args = build_parser().parse_args(argv)

    # --- 1. Configuration (resolved once, before any other I/O) ---
    file_config = load_config_file()
    provider = resolve_provider(args.provider, file_config)

    config = resolve_config(
        provider,
        api_key=args.api_key,
        endpoint=args.endpoint,
        model=args.model,
        file_config=file_config,
        require_api_key=not args.debug,
    )

    # --- 2. Diff acquisition ---
    diff = load_diff(file=args.file, commit=args.commit)

    # --- 3. Debug: estimate and stop before any network call ---
    if args.debug:
        print_token_estimate(diff)
        return 0

    # --- 4. Generate ---
    mr_comment = generate_mr_comment(config, diff)

    # --- 5. Output ---
    if args.output:
        write_output(args.output, mr_comment)
        console.print(f"[success]MR comment written to {escape(args.output)}[/success]")
    else:
        sys.stdout.write(mr_comment)
        sys.stdout.flush()
    return 0


def run() -> None:
    """Console-script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        console.print("\n[bold yellow]✋ Operation cancelled by user.[/bold yellow]")
        sys.exit(130)
    except MrCommentError as e:
        console.print(
            Panel(
                f"[yellow]{escape(str(e))}[/yellow]",
                title="[bold red]Error[/bold red]",
                border_style="red",
            )
        )
        sys.exit(1)
    except Exception as e:
        # Anything unexpected, e.g. a broken stdout pipe
        console.print(
            Panel(
                f"[bold red]An unexpected error occurred:[/bold red]\n[yellow]{escape(str(e))}[/yellow]",
                title="[bold red]Fatal Error[/bold red]",
                border_style="red",
            )
        )
        sys.exit(1)


# --- Entry Point ---
if __name__ == "__main__":
    run()
