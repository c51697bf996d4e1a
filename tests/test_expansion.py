"""Tests for expansion-set helpers."""
from __future__ import annotations

from seqtree.expansion import (
    collapse_actor,
    derive_default_expanded,
    expand_actor,
    set_expanded,
    toggle_actor,
)
from seqtree.types import ActorNode


def tree() -> list[ActorNode]:
    return [
        ActorNode(
            id="root",
            label="Root",
            children=[
                ActorNode(id="leaf-a", label="Leaf A"),
                ActorNode(
                    id="branch",
                    label="Branch",
                    default_expanded=False,
                    children=[
                        ActorNode(
                            id="inner",
                            label="Inner",
                            children=[ActorNode(id="leaf-b", label="Leaf B")],
                        )
                    ],
                ),
            ],
        ),
        ActorNode(id="solo", label="Solo", children=[], default_expanded=True),
    ]


class TestDefaultExpansion:
    def test_groups_default_to_expanded(self):
        assert "root" in derive_default_expanded(tree())

    def test_explicitly_collapsed_group_is_excluded(self):
        assert "branch" not in derive_default_expanded(tree())

    def test_groups_under_collapsed_ancestors_are_included(self):
        assert "inner" in derive_default_expanded(tree())

    def test_leaves_are_never_included(self):
        expanded = derive_default_expanded(tree())
        assert "solo" not in expanded
        assert "leaf-a" not in expanded
        assert expanded == {"root", "inner"}

    def test_empty_tree(self):
        assert derive_default_expanded([]) == frozenset()


class TestExpansionHelpers:
    def test_expand_returns_new_set(self):
        before = {"root"}
        after = expand_actor(before, "branch")
        assert after == {"root", "branch"}
        assert before == {"root"}

    def test_collapse_missing_id_is_noop(self):
        assert collapse_actor({"root"}, "branch") == {"root"}

    def test_collapse(self):
        assert collapse_actor({"root", "branch"}, "branch") == {"root"}

    def test_toggle_twice_restores(self):
        start = frozenset({"root"})
        assert toggle_actor(toggle_actor(start, "branch"), "branch") == start

    def test_toggle_removes_present_id(self):
        assert toggle_actor({"root", "branch"}, "root") == {"branch"}

    def test_set_expanded(self):
        assert set_expanded(["a", "b", "a"]) == frozenset({"a", "b"})

