"""safe-rebase: refuse to rebase commits that other references still point into."""

# Re-export the public API for library-style usage (and tests).
from .analyzer import AnalysisResult, SafetyAnalysis, analyze
from .cli import cli, main
from .config import __version__
from .errors import (
    AmbiguousReference,
    DetachedHead,
    NoUpstreamConfigured,
    NotARepository,
    RebaseFailed,
    ReferenceNotFound,
    SafeRebaseError,
)
from .git import GitRepository, git_passthrough, run
from .reachability import CommitGraph, ancestors, conflicting, intersects, rewrite_range
from .references import Reference, candidates, dwim_lookup, prefetch_name, short_name
from .report import format_conflicts, rebase, rebase_args, report_unsafe, show_conflicts

__all__ = [
    "__version__",
    # CLI
    "cli",
    "main",
    # Analysis
    "analyze",
    "AnalysisResult",
    "SafetyAnalysis",
    # Reachability
    "CommitGraph",
    "ancestors",
    "rewrite_range",
    "intersects",
    "conflicting",
    # References
    "Reference",
    "candidates",
    "dwim_lookup",
    "prefetch_name",
    "short_name",
    # Git
    "GitRepository",
    "run",
    "git_passthrough",
    # Reporting
    "rebase",
    "rebase_args",
    "report_unsafe",
    "format_conflicts",
    "show_conflicts",
    # Errors
    "SafeRebaseError",
    "ReferenceNotFound",
    "AmbiguousReference",
    "NoUpstreamConfigured",
    "DetachedHead",
    "NotARepository",
    "RebaseFailed",
]
