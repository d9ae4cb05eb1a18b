import pytest

import safe_rebase as sr


@pytest.fixture
def graph(memory_repo):
    def _graph(parents):
        return sr.CommitGraph(memory_repo(parents, {}))

    return _graph


def chain(names, root_parents=()):
    """Linear history: each name is the child of the one before it."""
    parents = {}
    previous = None
    for name in names:
        parents[name] = (previous,) if previous else tuple(root_parents)
        previous = name
    return parents


def test_rewrite_range_against_itself_is_empty(graph):
    g = graph(chain("ABC"))
    assert sr.rewrite_range(g, "C", "C") == frozenset()


def test_rewrite_range_linear(graph):
    g = graph(chain("ABCD"))
    assert sr.rewrite_range(g, "D", "B") == {"C", "D"}


def test_rewrite_range_when_branch_is_behind_upstream(graph):
    g = graph(chain("ABCD"))
    assert sr.rewrite_range(g, "B", "D") == frozenset()


def test_rewrite_range_diverged(graph):
    parents = {"A": (), "B": ("A",), "C": ("A",)}
    g = graph(parents)
    assert sr.rewrite_range(g, "C", "B") == {"C"}


def test_rewrite_range_merge_keeps_only_side_off_upstream(graph):
    # M merges U (upstream's side) with X (branch-only side).
    parents = {"A": (), "U": ("A",), "X": ("A",), "Y": ("X",), "M": ("U", "Y")}
    g = graph(parents)
    assert sr.rewrite_range(g, "M", "U") == {"M", "X", "Y"}


def test_rewrite_range_excludes_every_upstream_ancestor(graph):
    # The branch reaches A both directly and through the merge with upstream history.
    parents = {
        "A": (),
        "B": ("A",),
        "U1": ("B",),
        "U2": ("U1",),
        "F": ("B",),
        "M": ("F", "U1"),
    }
    g = graph(parents)
    commits = sr.rewrite_range(g, "M", "U2")
    assert commits == {"F", "M"}
    assert not commits & sr.ancestors(g, "U2")
    assert commits <= sr.ancestors(g, "M")


def test_ancestors_visits_diamond_once(memory_repo):
    parents = {"A": (), "B": ("A",), "C": ("A",), "D": ("B", "C")}
    repo = memory_repo(parents, {})
    g = sr.CommitGraph(repo)
    assert sr.ancestors(g, "D") == {"A", "B", "C", "D"}
    assert sorted(repo.parent_calls) == ["A", "B", "C", "D"]


def test_ancestors_stops_at_boundary(graph):
    g = graph(chain("ABCD"))
    assert sr.ancestors(g, "D", boundary={"B"}) == {"C", "D"}
    assert sr.ancestors(g, "B", boundary={"B"}) == set()


def test_intersects_direct_and_deep(graph):
    names = [f"c{i}" for i in range(30)]
    g = graph(chain(names))
    assert sr.intersects(g, "c29", set(), {"c29"})
    assert sr.intersects(g, "c29", set(), {"c0"})


def test_intersects_respects_boundary(graph):
    g = graph(chain("ABCDE"))
    assert not sr.intersects(g, "E", {"C"}, {"A"})
    assert sr.intersects(g, "E", {"C"}, {"D"})


def test_conflicting_no_false_positives_or_negatives(graph):
    parents = {
        "A": (),
        "B": ("A",),
        "C": ("A",),
        "D": ("C",),
        "E": ("D",),
        "X": ("B",),
    }
    g = graph(parents)
    targets = sr.rewrite_range(g, "C", "B")
    starts = [("child", "D"), ("unrelated", "X"), ("grandchild", "E"), ("base", "A")]
    boundary = sr.ancestors(g, "B")
    assert sr.conflicting(g, starts, boundary, targets) == ["child", "grandchild"]


def test_conflicting_with_empty_targets_reads_nothing(memory_repo):
    repo = memory_repo(chain("AB"), {})
    g = sr.CommitGraph(repo)
    assert sr.conflicting(g, [("ref", "B")], set(), frozenset()) == []
    assert repo.parent_calls == []


def test_conflicting_fetches_shared_history_once(memory_repo):
    names = [f"c{i}" for i in range(50)]
    parents = chain(names)
    # Ten references branching off the tip of a long shared history.
    for i in range(10):
        parents[f"r{i}"] = ("c49",)
    parents["rewritten"] = ("c0",)
    repo = memory_repo(parents, {})
    g = sr.CommitGraph(repo)

    targets = frozenset({"rewritten"})
    starts = [(f"r{i}", f"r{i}") for i in range(10)]
    assert sr.conflicting(g, starts, set(), targets) == []
    assert len(repo.parent_calls) == len(set(repo.parent_calls))
    assert g.fetched == 60
