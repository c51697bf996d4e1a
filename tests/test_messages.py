"""Tests for message projection -- visibility filtering, dense rows and
ordering hints with a stable tie-break.
"""
from __future__ import annotations

from seqtree.messages import project_messages
from seqtree.styles import SEQ
from seqtree.types import ActorNode, LayoutOptions, Message
from seqtree.visibility import resolve_visibility


def leaf(id_: str) -> ActorNode:
    return ActorNode(id=id_, label=id_)


def msg(id_: str, from_: str, to: str, row_index: int | None = None) -> Message:
    return Message(id=id_, from_=from_, to=to, label=id_, row_index=row_index)


def flat_visibility():
    return resolve_visibility([leaf("a"), leaf("b"), leaf("c")])


def nested_actors() -> list[ActorNode]:
    return [
        ActorNode(
            id="root",
            label="Root",
            children=[
                leaf("leaf-a"),
                ActorNode(id="branch", label="Branch", children=[leaf("leaf-b")], default_expanded=False),
            ],
        )
    ]


def projected_ids(projected) -> list[str]:
    return [p.message.id for p in projected]


# ============================================================================
# Ordering
# ============================================================================


class TestOrdering:
    def test_explicit_row_hints_reorder_messages(self):
        messages = [msg("m1", "a", "c", row_index=5), msg("m2", "a", "b", row_index=1)]
        projected = project_messages(messages, flat_visibility())
        assert projected_ids(projected) == ["m2", "m1"]
        assert [p.row_index for p in projected] == [0, 1]

    def test_equal_hints_keep_input_order(self):
        messages = [
            msg("m1", "a", "b", row_index=3),
            msg("m2", "b", "c", row_index=3),
            msg("m3", "c", "a", row_index=0),
        ]
        projected = project_messages(messages, flat_visibility())
        assert projected_ids(projected) == ["m3", "m1", "m2"]

    def test_messages_without_hints_keep_document_order(self):
        messages = [msg("m1", "a", "b"), msg("m2", "b", "c"), msg("m3", "c", "a")]
        projected = project_messages(messages, flat_visibility())
        assert projected_ids(projected) == ["m1", "m2", "m3"]

    def test_missing_hint_falls_back_to_input_position(self):
        messages = [msg("m1", "a", "b"), msg("m2", "b", "c", row_index=0), msg("m3", "c", "a")]
        projected = project_messages(messages, flat_visibility())
        # m1 sorts as (0, 0), m2 as (0, 1), m3 as (2, 2)
        assert projected_ids(projected) == ["m1", "m2", "m3"]


# ============================================================================
# Filtering and dense rows
# ============================================================================


class TestFiltering:
    def test_hidden_descendant_drops_message(self):
        messages = [msg("m1", "leaf-a", "branch"), msg("m2", "branch", "leaf-b")]
        projected = project_messages(messages, resolve_visibility(nested_actors()))
        assert projected_ids(projected) == ["m1"]

    def test_message_reappears_when_group_expands(self):
        messages = [msg("m1", "leaf-a", "branch"), msg("m2", "branch", "leaf-b")]
        v = resolve_visibility(nested_actors(), {"root", "branch"})
        assert projected_ids(project_messages(messages, v)) == ["m1", "m2"]

    def test_unknown_actor_is_dropped_silently(self):
        messages = [msg("m1", "a", "ghost"), msg("m2", "a", "b")]
        projected = project_messages(messages, flat_visibility())
        assert projected_ids(projected) == ["m2"]

    def test_rows_are_dense_after_filtering(self):
        messages = [
            msg("m1", "a", "ghost"),
            msg("m2", "a", "b"),
            msg("m3", "ghost", "b"),
            msg("m4", "b", "c"),
        ]
        projected = project_messages(messages, flat_visibility())
        assert [p.row_index for p in projected] == [0, 1]

    def test_row_y_uses_default_metrics(self):
        projected = project_messages([msg("m1", "a", "b"), msg("m2", "b", "c")], flat_visibility())
        assert projected[0].y == SEQ["vertical_padding"]
        assert projected[1].y - projected[0].y == SEQ["row_height"]

    def test_row_y_uses_layout_options(self):
        options = LayoutOptions(row_height=10, vertical_padding=0)
        projected = project_messages(
            [msg("m1", "a", "b"), msg("m2", "b", "c")], flat_visibility(), options
        )
        assert [p.y for p in projected] == [0, 10]

    def test_self_message_is_kept(self):
        projected = project_messages([msg("m1", "a", "a")], flat_visibility())
        assert projected_ids(projected) == ["m1"]
        assert projected[0].message.is_self

    def test_empty_message_list(self):
        assert project_messages([], flat_visibility()) == []
