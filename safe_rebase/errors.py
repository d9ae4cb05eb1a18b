"""Exceptions raised while resolving names and handing off the rebase."""


class SafeRebaseError(RuntimeError):
    """Base class for every error safe-rebase reports to its caller."""


class ReferenceNotFound(SafeRebaseError):
    def __init__(self, name):
        super().__init__(f"No reference or commit named '{name}'")
        self.name = name


class AmbiguousReference(SafeRebaseError):
    def __init__(self, name, matches):
        listed = ", ".join(sorted(matches))
        super().__init__(f"Short commit id '{name}' is ambiguous: {listed}")
        self.name = name
        self.matches = list(matches)


class NoUpstreamConfigured(SafeRebaseError):
    def __init__(self, branch):
        super().__init__(
            f"Branch '{branch}' has no upstream configured; pass an upstream explicitly"
        )
        self.branch = branch


class DetachedHead(SafeRebaseError):
    def __init__(self):
        super().__init__("HEAD is detached; pass the branch to rebase explicitly")


class RebaseFailed(SafeRebaseError):
    """The delegated `git rebase` exited with a non-zero status."""

    def __init__(self, returncode):
        super().__init__(f"git rebase exited with status {returncode}")
        self.returncode = returncode


class NotARepository(SafeRebaseError):
    def __init__(self, path):
        super().__init__(f"Not a git repository: {path}")
        self.path = path
