"""Act on an analysis: hand a safe rebase to git, or explain an unsafe one."""

import click

from .errors import RebaseFailed
from .git import git_passthrough
from .references import short_name


def rebase_args(result, interactive=False, onto=None, autostash=False):
    """Build the `git rebase` argv for a safe analysis result."""
    args = ["rebase"]
    if interactive:
        args.append("--interactive")
    if autostash:
        args.append("--autostash")
    if onto:
        args.extend(["--onto", onto])
    args.append(result.upstream.target)
    args.append(short_name(result.branch.name))
    return args


def rebase(repository, result, interactive=False, onto=None, autostash=False):
    """
    Run the rebase with the terminal attached.

    Raises RebaseFailed with git's exit status if the rebase does not complete;
    whatever state git left behind is for `git rebase --continue/--abort`.
    """
    if not result.safe:
        raise ValueError("Refusing to rebase: the analysis found conflicting references")

    args = rebase_args(result, interactive=interactive, onto=onto, autostash=autostash)
    returncode = git_passthrough(args, repo_path=repository.path)
    if returncode != 0:
        raise RebaseFailed(returncode)


def format_conflicts(result):
    """Format the conflict set for display, one reference per line."""
    lines = []
    for ref in result.references:
        lines.append(f"  - {ref.name} ({ref.target[:7]})")
    return "\n".join(lines)


def report_unsafe(result):
    """Tell the operator which references would keep the old commits alive."""
    count = len(result.rewrite_range)
    click.secho("Unsafe to rebase!", fg="red", bold=True)
    click.echo(
        f"Rebasing {short_name(result.branch.name)} rewrites {count} commit(s) "
        "that these references still contain:"
    )
    click.echo(format_conflicts(result))


def log_args(result):
    """Build the `git log --graph` argv bounding the branch, upstream and conflicts."""
    return ["log", "--graph", "--oneline", result.branch.name, result.upstream.name, *result.names]


def show_conflicts(repository, result):
    """Show the history of the branch, its upstream and every conflicting reference."""
    return git_passthrough(log_args(result), repo_path=repository.path)
