"""Reference snapshots and the filter that picks collision candidates."""

from collections import namedtuple

from .config import (
    DWIM_RULES,
    HEADS_PREFIX,
    PREFETCH_PREFIX,
    REFS_PREFIX,
    REMOTES_PREFIX,
    STASH_REF,
)

Reference = namedtuple("Reference", ["name", "target"])


def short_name(name):
    """Strip the namespace git adds in front of branch, tag and remote names."""
    for prefix in (HEADS_PREFIX, "refs/tags/", REMOTES_PREFIX):
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def prefetch_name(name):
    """
    Return the name of the prefetch mirror kept for a remote-tracking reference.

    `git fetch --prefetch` stores `refs/remotes/<remote>/<branch>` under
    `refs/prefetch/remotes/<remote>/<branch>`. Any other reference has no mirror
    and yields None.
    """
    if not name or not name.startswith(REMOTES_PREFIX):
        return None
    return PREFETCH_PREFIX + name[len(REFS_PREFIX):]


def dwim_lookup(references, name):
    """
    Find the reference a short name refers to, in git's lookup order.

    Returns None when no rule matches.
    """
    by_name = {ref.name: ref for ref in references}
    for rule in DWIM_RULES:
        ref = by_name.get(rule.format(name))
        if ref is not None:
            return ref
    return None


def candidates(references, rewritten, upstream=None):
    """
    Narrow a reference snapshot to the references worth checking for collisions.

    Args:
        references: Snapshot of every reference in the repository
        rewritten: The branch reference about to be rewritten
        upstream: The rewritten branch's configured upstream, if it has one

    Returns:
        List of references, in snapshot order, minus the rewritten branch, the
        stash, the upstream and the upstream's prefetch mirror.
    """
    excluded = {rewritten.name, STASH_REF}
    if upstream is not None:
        excluded.add(upstream.name)
        mirror = prefetch_name(upstream.name)
        if mirror is not None:
            excluded.add(mirror)

    return [ref for ref in references if ref.name not in excluded]
