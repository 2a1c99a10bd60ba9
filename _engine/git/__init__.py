from .command import run_git_command
from .diff import build_diff_command, filter_diff, get_diff_from_git
from .files_controller import load_diff, read_diff_file, write_output
