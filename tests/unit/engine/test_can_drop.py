"""Tests for drop eligibility."""

from itertools import product

import pytest

from graphdrop.engine import Maybe, No, Yes, can_drop, render_hint
from graphdrop.model import (
    BranchOperand,
    ChangeOperand,
    LocalBranch,
    MergeOperand,
    ParentOperand,
    RemoteBranch,
    RepositoryOperand,
    RevisionOperand,
    TreePath,
)


@pytest.fixture
def graph(make_header):
    """root <- p <- x <- y, plus a merge m of p and x."""
    root = make_header("r", is_immutable=True)
    p = make_header("p", parents=[root])
    x = make_header("x", parents=[p])
    y = make_header("y", parents=[x])
    m = make_header("m", parents=[p, x])
    return {"root": root, "p": p, "x": x, "y": y, "m": m}


def test_rebase_onto_revision(graph):
    """A mutable revision dropped on another rebases onto it."""
    result = can_drop(
        RevisionOperand(header=graph["x"]), RevisionOperand(header=graph["y"])
    )

    assert isinstance(result, Yes)
    assert render_hint(result) == "Rebasing revision xxxxxxxx onto yyyyyyyy"


def test_revision_onto_itself_rerendered(graph, make_header):
    """Self-drops are caught even when the operands are distinct objects."""
    again = make_header("x", parents=[graph["p"]], description="new text")

    assert isinstance(
        can_drop(RevisionOperand(header=graph["x"]), RevisionOperand(header=again)),
        No,
    )


def test_insert_before_child(graph):
    result = can_drop(
        RevisionOperand(header=graph["y"]),
        ParentOperand(header=graph["p"], child=graph["x"]),
    )

    assert render_hint(result) == "Inserting revision yyyyyyyy before xxxxxxxx"


def test_insert_before_immutable_child(graph, make_header):
    """Dropping on an edge into an immutable revision is blocked."""
    z = make_header("z")
    c = make_header("c", parents=[z], is_immutable=True)

    result = can_drop(
        RevisionOperand(header=graph["x"]), ParentOperand(header=z, child=c)
    )

    assert result == Maybe(hint="can't insert before an immutable revision")


def test_insert_before_itself(graph):
    result = can_drop(
        RevisionOperand(header=graph["x"]),
        ParentOperand(header=graph["p"], child=graph["x"]),
    )

    assert isinstance(result, No)


def test_add_parent_to_merge(graph):
    result = can_drop(
        RevisionOperand(header=graph["y"]), MergeOperand(header=graph["m"])
    )

    assert render_hint(result) == "Adding parent to revision mmmmmmmm"


def test_immutable_revision_can_become_parent(graph):
    """Adding a parent leaves the source alone, so immutability is fine."""
    result = can_drop(
        RevisionOperand(header=graph["root"]), MergeOperand(header=graph["m"])
    )

    assert isinstance(result, Yes)


def test_add_self_as_parent(graph):
    result = can_drop(
        RevisionOperand(header=graph["m"]), MergeOperand(header=graph["m"])
    )

    assert isinstance(result, No)


def test_abandon(graph):
    result = can_drop(RevisionOperand(header=graph["x"]), RepositoryOperand())

    expected = f"Abandoning commit {graph['x'].id.commit.prefix}"
    assert render_hint(result) == expected


def test_immutable_revision_cannot_drop(graph):
    result = can_drop(RevisionOperand(header=graph["root"]), RepositoryOperand())

    assert isinstance(result, No)


def test_remove_parent_of_merge(graph):
    result = can_drop(
        ParentOperand(header=graph["p"], child=graph["m"]), RepositoryOperand()
    )

    assert render_hint(result) == "Removing parent from revision mmmmmmmm"


def test_remove_only_parent(graph):
    """The single-parent guard keeps a child from losing its last parent."""
    result = can_drop(
        ParentOperand(header=graph["p"], child=graph["x"]), RepositoryOperand()
    )

    assert isinstance(result, No)


def test_squash_into_revision(graph):
    change = ChangeOperand(
        header=graph["y"], path=TreePath.from_repo_path("src/a.txt")
    )

    result = can_drop(change, RevisionOperand(header=graph["x"]))

    assert render_hint(result) == "Squashing changes at src/a.txt into xxxxxxxx"


def test_squash_into_own_revision(graph):
    change = ChangeOperand(header=graph["y"], path=TreePath.from_repo_path("a"))

    assert isinstance(can_drop(change, RevisionOperand(header=graph["y"])), No)


def test_squash_into_immutable_revision(graph):
    change = ChangeOperand(header=graph["y"], path=TreePath.from_repo_path("a"))

    result = can_drop(change, RevisionOperand(header=graph["root"]))

    assert result == Maybe(hint="revision is immutable")


def test_restore_from_single_parent(graph):
    change = ChangeOperand(
        header=graph["y"], path=TreePath.from_repo_path("src/a.txt")
    )

    result = can_drop(change, RepositoryOperand())

    expected = (
        f"Restoring changes at src/a.txt from parent "
        f"{graph['x'].id.commit.prefix}"
    )
    assert render_hint(result) == expected


def test_restore_from_merge_is_ambiguous(graph):
    """With two parents there is no single tree to restore from."""
    change = ChangeOperand(
        header=graph["m"], path=TreePath.from_repo_path("src/a.txt")
    )

    result = can_drop(change, RepositoryOperand())

    assert isinstance(result, Maybe)


def test_move_branch_to_revision(graph):
    branch = BranchOperand(header=graph["x"], name=LocalBranch(branch_name="main"))

    result = can_drop(branch, RevisionOperand(header=graph["y"]))

    assert render_hint(result) == "Moving branch main to yyyyyyyy"


def test_reset_branch_to_remote(graph):
    local = BranchOperand(header=graph["x"], name=LocalBranch(branch_name="main"))
    remote = BranchOperand(
        header=graph["y"],
        name=RemoteBranch(branch_name="main", remote_name="origin"),
    )

    result = can_drop(local, remote)

    assert render_hint(result) == "Resetting branch main to remote"


def test_branch_onto_other_branch(graph):
    local = BranchOperand(header=graph["x"], name=LocalBranch(branch_name="main"))
    other = BranchOperand(
        header=graph["y"],
        name=RemoteBranch(branch_name="dev", remote_name="origin"),
    )

    assert isinstance(can_drop(local, other), No)


def test_remote_branch_cannot_drop(graph):
    remote = BranchOperand(
        header=graph["y"],
        name=RemoteBranch(branch_name="main", remote_name="origin"),
    )
    local = BranchOperand(header=graph["x"], name=LocalBranch(branch_name="main"))

    assert isinstance(can_drop(remote, local), No)


def _all_operands(graph):
    p, x, m = graph["p"], graph["x"], graph["m"]
    path = TreePath.from_repo_path("src/a.txt")
    return [
        RepositoryOperand(),
        RevisionOperand(header=x),
        RevisionOperand(header=graph["root"]),
        MergeOperand(header=m),
        ParentOperand(header=p, child=m),
        ParentOperand(header=p, child=x),
        ChangeOperand(header=x, path=path),
        ChangeOperand(header=m, path=path),
        BranchOperand(header=x, name=LocalBranch(branch_name="main")),
        BranchOperand(
            header=x,
            name=RemoteBranch(branch_name="main", remote_name="origin"),
        ),
    ]


def test_every_pair_is_classified(graph):
    """Every pair of operands gets exactly one of yes, maybe or no."""
    operands = _all_operands(graph)

    for source, target in product(operands, repeat=2):
        assert isinstance(can_drop(source, target), (Yes, Maybe, No))


def test_self_drops_are_never_allowed(graph):
    for operand in _all_operands(graph):
        assert isinstance(can_drop(operand, operand), No)
