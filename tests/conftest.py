import subprocess

import pytest

import safe_rebase as sr


@pytest.fixture
def tmp_git_repo(tmp_path):
    """Create a temporary git repository on an unborn `main` with user config set."""
    repo = tmp_path / "repo"
    repo.mkdir()

    def git(*args):
        return (
            subprocess.check_output(["git", "-C", str(repo), *args])
            .decode("utf-8")
            .strip()
        )

    git("init", "--quiet")
    git("symbolic-ref", "HEAD", "refs/heads/main")
    git("config", "user.email", "test@example.com")
    git("config", "user.name", "Test User")
    git("config", "commit.gpgsign", "false")
    return repo, git


@pytest.fixture
def commit():
    """Commit on the checked-out branch of a tmp_git_repo and return the new id."""

    def _commit(git, message):
        git("commit", "--quiet", "--allow-empty", "-m", message)
        return git("rev-parse", "HEAD")

    return _commit


class MemoryRepository:
    """In-memory graph accessor with the same surface as GitRepository."""

    def __init__(self, parents, refs, head=None, upstreams=None, prefetch_error=None):
        self.path = None
        self.parents = {oid: tuple(p) for oid, p in parents.items()}
        self.refs = dict(refs)
        self.head = head
        self.upstreams = dict(upstreams or {})
        self.prefetch_error = prefetch_error
        self.parent_calls = []
        self.prefetch_calls = 0

    def list_references(self):
        return [sr.Reference(name, target) for name, target in self.refs.items()]

    def resolve(self, name):
        ref = sr.dwim_lookup(self.list_references(), name)
        if ref is None:
            raise sr.ReferenceNotFound(name)
        return ref

    def resolve_by_prefix(self, partial):
        matches = [oid for oid in self.parents if oid.startswith(partial)]
        if not matches:
            raise sr.ReferenceNotFound(partial)
        if len(matches) > 1:
            raise sr.AmbiguousReference(partial, matches)
        return matches[0]

    def parents_of(self, oid):
        self.parent_calls.append(oid)
        return self.parents[oid]

    def current_branch(self):
        if self.head is None:
            raise sr.DetachedHead()
        return sr.Reference(self.head, self.refs[self.head])

    def find_branch(self, name):
        full = name if name.startswith("refs/heads/") else "refs/heads/" + name
        if full not in self.refs:
            raise sr.ReferenceNotFound(name)
        return sr.Reference(full, self.refs[full])

    def upstream_of(self, reference):
        upstream = self.upstreams.get(reference.name)
        if upstream is None:
            raise sr.NoUpstreamConfigured(sr.short_name(reference.name))
        if upstream not in self.refs:
            raise sr.ReferenceNotFound(upstream)
        return sr.Reference(upstream, self.refs[upstream])

    def prefetch(self):
        self.prefetch_calls += 1
        if self.prefetch_error is not None:
            raise self.prefetch_error


@pytest.fixture
def memory_repo():
    return MemoryRepository


@pytest.fixture
def scenario_repo(memory_repo):
    """
    A is the root; main has B on top of A, feature has C on top of A.

    Returns a factory so tests can add references before analysing.
    """

    def _build(extra_refs=None, **kwargs):
        refs = {"refs/heads/main": "b" * 40, "refs/heads/feature": "c" * 40}
        refs.update(extra_refs or {})
        parents = {"a" * 40: (), "b" * 40: ("a" * 40,), "c" * 40: ("a" * 40,)}
        kwargs.setdefault("head", "refs/heads/feature")
        return memory_repo(parents, refs, **kwargs)

    return _build
