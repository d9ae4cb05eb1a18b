"""Reachability queries over the commit graph.

Parent edges are fetched from the repository once per analysis and memoized in
a `CommitGraph`. Every query below walks that memo only, so references sharing
a long history do not cause the repository to be read again for each one.
"""

import logging

logger = logging.getLogger(__name__)


class CommitGraph:
    """Lazily memoized view of the parent relation of a repository."""

    def __init__(self, repository):
        self._repository = repository
        self._parents = {}

    def parents(self, oid):
        parents = self._parents.get(oid)
        if parents is None:
            parents = tuple(self._repository.parents_of(oid))
            self._parents[oid] = parents
        return parents

    @property
    def fetched(self):
        """Number of commits whose parents have been loaded so far."""
        return len(self._parents)


def ancestors(graph, start, boundary=()):
    """
    Return every commit reachable from `start`, `start` included.

    Commits in `boundary` are neither returned nor expanded.
    """
    if start in boundary:
        return set()

    seen = {start}
    stack = [start]
    while stack:
        oid = stack.pop()
        for parent in graph.parents(oid):
            if parent in seen or parent in boundary:
                continue
            seen.add(parent)
            stack.append(parent)
    return seen


def rewrite_range(graph, branch_tip, upstream_tip, excluded=None):
    """
    Return the commits a rebase of `branch_tip` onto `upstream_tip` recreates.

    That is every commit reachable from the branch tip which is not reachable
    from the upstream tip. The upstream side is walked first so the branch walk
    stops as soon as it enters shared history. Pass `excluded` when the
    ancestors of the upstream tip are already known.
    """
    if branch_tip == upstream_tip:
        return frozenset()

    if excluded is None:
        excluded = ancestors(graph, upstream_tip)
    commits = frozenset(ancestors(graph, branch_tip, boundary=excluded))
    logger.debug(
        "Rewrite range %s..%s holds %d commit(s); %d commit(s) loaded",
        upstream_tip[:12],
        branch_tip[:12],
        len(commits),
        graph.fetched,
    )
    return commits


def intersects(graph, start, boundary, targets):
    """
    Tell whether any commit reachable from `start` is in `targets`.

    The search never expands commits in `boundary` and stops at the first hit.
    """
    if start in targets:
        return True
    if start in boundary:
        return False

    seen = {start}
    stack = [start]
    while stack:
        oid = stack.pop()
        for parent in graph.parents(oid):
            if parent in targets:
                return True
            if parent in seen or parent in boundary:
                continue
            seen.add(parent)
            stack.append(parent)
    return False


def conflicting(graph, starts_by_reference, boundary, targets):
    """
    Return the references whose history reaches into `targets`.

    Args:
        graph: Shared `CommitGraph` memo
        starts_by_reference: Iterable of (reference, start commit) pairs
        boundary: Commits whose ancestry is known to be safe to skip
        targets: The commits being looked for

    Returns:
        List of the references whose search hit a target, in input order.
    """
    hits = []
    if not targets:
        return hits

    for reference, start in starts_by_reference:
        if intersects(graph, start, boundary, targets):
            logger.debug("%s reaches into the rewrite range", getattr(reference, "name", reference))
            hits.append(reference)
    return hits
