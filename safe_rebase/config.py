"""Configuration constants and settings for safe-rebase."""

__version__ = "0.1.0"

STASH_REF = "refs/stash"
REFS_PREFIX = "refs/"
HEADS_PREFIX = "refs/heads/"
REMOTES_PREFIX = "refs/remotes/"
PREFETCH_PREFIX = "refs/prefetch/"

# Top-level refs outside refs/ that git also accepts as short names.
PSEUDO_REFS = ("HEAD", "ORIG_HEAD", "FETCH_HEAD", "MERGE_HEAD", "CHERRY_PICK_HEAD", "REBASE_HEAD")

# Lookup order git uses when expanding a short reference name.
DWIM_RULES = (
    "{}",
    "refs/{}",
    "refs/tags/{}",
    "refs/heads/{}",
    "refs/remotes/{}",
    "refs/remotes/{}/HEAD",
)

# How many commits a single `git rev-list --parents` call loads.
PARENTS_WINDOW = 2000

EXIT_UNSAFE = 1
EXIT_INPUT_ERROR = 2
