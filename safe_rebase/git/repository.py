"""Read-only commit graph access backed by the git executable."""

import logging
import os
import re
import subprocess

from ..config import HEADS_PREFIX, PARENTS_WINDOW, PSEUDO_REFS
from ..errors import (
    AmbiguousReference,
    DetachedHead,
    NoUpstreamConfigured,
    NotARepository,
    ReferenceNotFound,
)
from ..references import Reference, dwim_lookup, short_name
from .core import run, try_run

logger = logging.getLogger(__name__)

HEX_PREFIX_RE = re.compile(r"^[0-9a-fA-F]{4,64}$")

REF_FORMAT = "%(refname)%00%(objecttype)%00%(objectname)%00%(*objecttype)%00%(*objectname)"


class GitRepository:
    """
    Graph accessor over the repository containing `path`.

    Every method reads; nothing here moves a reference. `prefetch` is the only
    call that talks to a remote.
    """

    def __init__(self, path=None, window=PARENTS_WINDOW):
        self.path = os.fspath(path) if path is not None else os.getcwd()
        self.window = max(1, int(window))
        self._parents = {}
        if try_run(["rev-parse", "--git-dir"], repo_path=self.path) is None:
            raise NotARepository(self.path)

    def _git(self, args):
        return run(args, repo_path=self.path)

    def _try_git(self, args):
        return try_run(args, repo_path=self.path)

    def _peel(self, rev):
        """Return the commit id `rev` points at, or None."""
        return self._try_git(["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"]) or None

    def list_references(self):
        """Snapshot every reference that peels to a commit, in git's name order."""
        out = self._git(["for-each-ref", f"--format={REF_FORMAT}"])
        references = []
        for line in out.splitlines():
            if not line.strip():
                continue
            name, otype, oid, peeled_type, peeled_oid = line.split("\0")
            if otype == "commit":
                references.append(Reference(name, oid))
            elif otype == "tag" and peeled_type == "commit":
                references.append(Reference(name, peeled_oid))
            elif otype == "tag" and peeled_type == "tag":
                # A tag of a tag: `%(*objecttype)` only removes one layer.
                target = self._peel(name)
                if target is None:
                    logger.debug("Skipping %s: tag chain does not end at a commit", name)
                else:
                    references.append(Reference(name, target))
            else:
                logger.debug("Skipping %s: does not point at a commit", name)
        return references

    def resolve(self, name):
        """Resolve a short reference name (`main`, `origin/main`, `v1.0`, `HEAD`)."""
        ref = dwim_lookup(self.list_references(), name)
        if ref is not None:
            return ref
        if name in PSEUDO_REFS:
            target = self._peel(name)
            if target is not None:
                return Reference(name, target)
        raise ReferenceNotFound(name)

    def resolve_by_prefix(self, partial):
        """Resolve a full or abbreviated commit id to the full id."""
        if not HEX_PREFIX_RE.match(partial or ""):
            raise ReferenceNotFound(partial)

        out = self._try_git(["rev-parse", f"--disambiguate={partial.lower()}"]) or ""
        matches = [
            oid
            for oid in out.split()
            if self._try_git(["cat-file", "-t", oid]) == "commit"
        ]
        if not matches:
            raise ReferenceNotFound(partial)
        if len(matches) > 1:
            raise AmbiguousReference(partial, matches)
        return matches[0]

    def parents_of(self, oid):
        """
        Return the parent ids of commit `oid`.

        Loads `window` commits of ancestry per git call. Only the latest window
        is buffered, and an entry leaves the buffer once it has been returned;
        keeping parents for the length of an analysis is `CommitGraph`'s job.
        """
        parents = self._parents.pop(oid, None)
        if parents is not None:
            return parents

        try:
            out = self._git(["rev-list", "--parents", "-n", str(self.window), oid])
        except subprocess.CalledProcessError:
            raise ReferenceNotFound(oid)

        window = {}
        for line in out.splitlines():
            ids = line.split()
            if ids:
                window.setdefault(ids[0], tuple(ids[1:]))
        logger.debug("Loaded parents of %d commit(s) from %s", len(window), oid[:12])
        self._parents = window
        return self._parents.pop(oid)

    @property
    def buffered(self):
        """Number of commits loaded by the last window and not yet handed out."""
        return len(self._parents)

    def current_branch(self):
        """Return the checked-out branch; raise DetachedHead if there is none."""
        name = self._try_git(["symbolic-ref", "--quiet", "HEAD"])
        if not name or not name.startswith(HEADS_PREFIX):
            raise DetachedHead()
        target = self._peel(name)
        if target is None:
            raise ReferenceNotFound(short_name(name))
        return Reference(name, target)

    def find_branch(self, name):
        """Look up a local branch by short or full name."""
        full = name if name.startswith(HEADS_PREFIX) else HEADS_PREFIX + name
        target = self._peel(full)
        if target is None:
            raise ReferenceNotFound(name)
        return Reference(full, target)

    def upstream_of(self, reference):
        """Return the configured upstream of a local branch."""
        upstream = self._try_git(["for-each-ref", "--format=%(upstream)", reference.name])
        if not upstream:
            raise NoUpstreamConfigured(short_name(reference.name))
        target = self._peel(upstream)
        if target is None:
            raise ReferenceNotFound(short_name(upstream))
        return Reference(upstream, target)

    def prefetch(self):
        """Refresh `refs/prefetch/` from every remote. Raises on failure."""
        self._git(["fetch", "--prefetch", "--quiet"])
