"""Decide whether rebasing a branch would strand commits other references need."""

import logging
import re
import subprocess
from collections import namedtuple

import click

from .errors import NoUpstreamConfigured, ReferenceNotFound
from .reachability import CommitGraph, ancestors, conflicting, rewrite_range
from .references import Reference, candidates

logger = logging.getLogger(__name__)

HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


class AnalysisResult(
    namedtuple("AnalysisResult", ["branch", "upstream", "rewrite_range", "references"])
):
    """
    Outcome of one analysis.

    `references` is the conflict set: every candidate reference whose history
    reaches into `rewrite_range`. An empty conflict set means the rebase is safe.
    """

    __slots__ = ()

    @property
    def safe(self):
        return not self.references

    @property
    def names(self):
        return [ref.name for ref in self.references]


class SafetyAnalysis:
    """
    One run of the safety check, from resolved names to the conflict set.

    Constructing the analysis resolves the branch and upstream (state
    "resolved"); `compute_range` and `check` then move it to "range-computed"
    and "checked". Each phase runs once; resolution errors propagate from the
    constructor and nothing is traversed.
    """

    RESOLVED = "resolved"
    RANGE_COMPUTED = "range-computed"
    CHECKED = "checked"

    def __init__(self, repository, upstream=None, branch=None, prefetch=True):
        self.repository = repository
        self.prefetch_enabled = prefetch
        self.graph = CommitGraph(repository)

        self.branch = self._resolve_branch(branch)
        self.configured_upstream = self._configured_upstream()
        self.upstream = self._resolve_upstream(upstream)

        self.snapshot = None
        self.boundary = None
        self.rewrite_range = None
        self.references = None
        self.state = self.RESOLVED
        logger.debug(
            "Resolved %s (%s) onto %s (%s)",
            self.branch.name,
            self.branch.target[:12],
            self.upstream.name,
            self.upstream.target[:12],
        )

    def _resolve_branch(self, name):
        if name is None:
            return self.repository.current_branch()
        return self.repository.find_branch(name)

    def _configured_upstream(self):
        try:
            return self.repository.upstream_of(self.branch)
        except (NoUpstreamConfigured, ReferenceNotFound):
            return None

    def _resolve_upstream(self, name):
        if name is None:
            if self.configured_upstream is None:
                # Let the accessor raise its own input error.
                return self.repository.upstream_of(self.branch)
            return self.configured_upstream

        try:
            return self.repository.resolve(name)
        except ReferenceNotFound:
            if not HEX_RE.match(name):
                raise
        oid = self.repository.resolve_by_prefix(name)
        return Reference(oid, oid)

    def _require(self, state):
        if self.state != state:
            raise RuntimeError(f"Analysis is {self.state}, expected {state}")

    def prefetch(self):
        """Refresh prefetched refs. Failures are reported and ignored."""
        if not self.prefetch_enabled:
            return
        try:
            self.repository.prefetch()
        except (subprocess.CalledProcessError, OSError) as exc:
            detail = getattr(exc, "stderr", None) or b""
            if isinstance(detail, (bytes, bytearray)):
                detail = detail.decode("utf-8", errors="ignore")
            detail = detail.strip() or str(exc)
            logger.debug("git fetch --prefetch failed: %r", exc)
            click.secho(
                f"Prefetch failed; checking local references only.\n{detail}",
                fg="yellow",
                err=True,
            )

    def compute_range(self):
        """
        Capture the reference snapshot, then compute the rewrite range.

        The boundary is every ancestor of the upstream tip, so this walks the
        upstream's whole history even when the branch is one commit ahead. The
        accessor only exposes parent edges (no commit dates or generation
        numbers), and without them there is no point at which the walk can stop
        early and still exclude every upstream ancestor.
        """
        self._require(self.RESOLVED)
        self.snapshot = self.repository.list_references()
        if self.branch.target == self.upstream.target:
            self.boundary = frozenset()
            self.rewrite_range = frozenset()
        else:
            self.boundary = frozenset(ancestors(self.graph, self.upstream.target))
            self.rewrite_range = rewrite_range(
                self.graph,
                self.branch.target,
                self.upstream.target,
                excluded=self.boundary,
            )
        self.state = self.RANGE_COMPUTED
        return self.rewrite_range

    def check(self):
        self._require(self.RANGE_COMPUTED)
        to_check = candidates(self.snapshot, self.branch, self.configured_upstream)
        logger.debug(
            "Checking %d of %d reference(s) against %d commit(s)",
            len(to_check),
            len(self.snapshot),
            len(self.rewrite_range),
        )
        self.references = conflicting(
            self.graph,
            [(ref, ref.target) for ref in to_check],
            self.boundary,
            self.rewrite_range,
        )
        self.state = self.CHECKED
        return self.result

    @property
    def result(self):
        self._require(self.CHECKED)
        return AnalysisResult(self.branch, self.upstream, self.rewrite_range, self.references)

    def run(self):
        self.prefetch()
        self.compute_range()
        return self.check()


def analyze(repository, upstream=None, branch=None, prefetch=True):
    """
    Check whether rebasing `branch` onto `upstream` is safe.

    Args:
        repository: Graph accessor (see `safe_rebase.git.GitRepository`)
        upstream: Reference short name or commit id; defaults to the branch's
            configured upstream
        branch: Local branch name; defaults to the checked-out branch
        prefetch: Run `git fetch --prefetch` first (best-effort)

    Returns:
        AnalysisResult; `result.safe` is False when other references would keep
        commits the rebase recreates.
    """
    return SafetyAnalysis(repository, upstream=upstream, branch=branch, prefetch=prefetch).run()
