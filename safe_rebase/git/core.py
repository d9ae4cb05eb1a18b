"""Core git utilities and subprocess wrappers."""

import shlex
import subprocess


def git_argv(repo_path, args):
    """Build the argv for a git invocation, pinned to `repo_path` when given."""
    args = list(args) if isinstance(args, (list, tuple)) else shlex.split(args)
    if repo_path is None:
        return ["git", *args]
    return ["git", "-C", str(repo_path), *args]


def run(args, repo_path=None):
    """
    Run a git command and return its stripped output.

    Accepts either a string (split using shlex) or an argv list. We avoid invoking
    a shell so reference names are passed through untouched. Raises
    subprocess.CalledProcessError when git exits non-zero.
    """
    return (
        subprocess.check_output(git_argv(repo_path, args), stderr=subprocess.PIPE)
        .decode("utf-8", errors="ignore")
        .strip()
    )


def try_run(args, repo_path=None):
    """Like `run`, but return None instead of raising when git exits non-zero."""
    try:
        return run(args, repo_path=repo_path)
    except subprocess.CalledProcessError:
        return None


def git_passthrough(args, repo_path=None):
    """
    Run a git command with the terminal attached and return its exit status.

    Used for commands the operator interacts with or reads directly (rebase,
    log, fetch).
    """
    return subprocess.run(git_argv(repo_path, args)).returncode
