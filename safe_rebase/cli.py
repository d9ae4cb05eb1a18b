"""CLI command and entry point."""

import click

from ._logging import configure_logging
from .config import EXIT_INPUT_ERROR, EXIT_UNSAFE, __version__
from .errors import RebaseFailed, SafeRebaseError
from .report import report_unsafe


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.option(
    "-C",
    "repo_path",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Run as if started in this directory",
)
@click.option("-i", "--interactive", is_flag=True, help="Rebase interactively")
@click.option("-n", "--dry-run", is_flag=True, help="Only report whether the rebase is safe")
@click.option("--onto", default=None, help="Passed to git rebase --onto untouched")
@click.option("--autostash", is_flag=True, help="Passed to git rebase --autostash")
@click.option(
    "--prefetch/--no-prefetch",
    default=True,
    show_default=True,
    help="Run git fetch --prefetch before checking",
)
@click.option("-v", "--verbose", is_flag=True, help="Log the traversal to stderr")
@click.argument("upstream", required=False)
@click.argument("branch", required=False)
@click.pass_context
def cli(ctx, repo_path, interactive, dry_run, onto, autostash, prefetch, verbose, upstream, branch):
    """Rebase BRANCH onto UPSTREAM, unless another reference still needs its commits.

    BRANCH defaults to the checked-out branch and UPSTREAM to its configured
    upstream.
    """
    import safe_rebase as sr

    configure_logging(verbose)

    try:
        repository = sr.GitRepository(repo_path)
        result = sr.analyze(repository, upstream=upstream, branch=branch, prefetch=prefetch)
    except SafeRebaseError as exc:
        click.secho(str(exc), fg="red", err=True)
        ctx.exit(EXIT_INPUT_ERROR)

    if not result.safe:
        report_unsafe(result)
        if click.confirm("See why?", default=False):
            sr.show_conflicts(repository, result)
        ctx.exit(EXIT_UNSAFE)

    if dry_run:
        click.secho("Safe to rebase!", fg="green", bold=True)
        return

    try:
        sr.rebase(repository, result, interactive=interactive, onto=onto, autostash=autostash)
    except RebaseFailed as exc:
        click.secho(f"Rebase failed: {exc}", fg="red", err=True)
        ctx.exit(exc.returncode)

    click.secho("Rebase complete. History rewritten.", fg="green", bold=True)
    click.echo("Remember to push with --force-with-lease to update remote history.")


def main():
    """Main entry point."""
    cli(auto_envvar_prefix="SAFE_REBASE")


if __name__ == "__main__":
    main()
