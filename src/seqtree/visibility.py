from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .expansion import derive_default_expanded
from .types import ActorAlignment, ActorNode, Span, VisibilityResult, VisibleNode

# ============================================================================
# Visibility & column resolver
#
# Walks the actor tree once for a given expansion set:
#   1. Top-level actors are always visible
#   2. A group is expanded when it has children and its id is in the set;
#      children of a collapsed group are never visited, so ancestor collapse
#      always wins over a descendant's own membership
#   3. Every non-expanded node consumes exactly one leaf column
#   4. An expanded group spans the union of its children's columns
#   5. Anchors follow alignment: left edge, right edge, or centre of the span
# ============================================================================

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Frame:
    node: ActorNode
    depth: int
    parent_id: str | None
    # Set on the closing frame of an expanded group
    visible: VisibleNode | None = None
    first_leaf: int = 0


def _anchor(alignment: ActorAlignment, leaf_start: int, leaf_end: int) -> float:
    if alignment == "left":
        return float(leaf_start)
    if alignment == "right":
        return float(leaf_end + 1)
    return (leaf_start + leaf_end + 1) / 2


def resolve_visibility(
    actors: Sequence[ActorNode],
    expanded: Iterable[str] | None = None,
) -> VisibilityResult:
    """Assign leaf columns, header rows and anchors to the visible actors.

    When ``expanded`` is None the default expansion set is derived from the
    tree. Ids in the set that are unknown or name a plain participant are
    ignored. Actor ids are assumed unique; run validate_model first when the
    tree comes from untrusted input.
    """
    expanded_ids = set(derive_default_expanded(actors) if expanded is None else expanded)

    visible_nodes: list[VisibleNode] = []
    header_rows: list[list[VisibleNode]] = []
    leaf_counter = 0
    # Node objects on the current path from a root; guards self-nesting
    on_path: set[int] = set()

    stack = [_Frame(node, 0, None) for node in reversed(actors)]
    while stack:
        frame = stack.pop()
        node = frame.node

        if frame.visible is not None:
            visible = frame.visible
            on_path.discard(id(node))
            if leaf_counter == frame.first_leaf:
                # Every child was skipped; fall back to a single column
                visible.expanded = False
                leaf_counter += 1
            visible.leaf_start = frame.first_leaf
            visible.leaf_end = leaf_counter - 1
            visible.anchor = _anchor(visible.alignment, visible.leaf_start, visible.leaf_end)
            continue

        if id(node) in on_path:
            logger.warning("Actor %r is nested inside itself; skipping", node.id)
            continue

        is_expanded = node.has_children and node.id in expanded_ids
        visible = VisibleNode(
            actor_id=node.id,
            label=node.label,
            depth=frame.depth,
            parent_actor_id=frame.parent_id,
            has_children=node.has_children,
            expanded=is_expanded,
            leaf_start=leaf_counter,
            leaf_end=leaf_counter,
            anchor=0.0,
            alignment=node.alignment,
            class_name=node.class_name,
            region_class_name=node.region_class_name,
        )
        visible_nodes.append(visible)
        if frame.depth == len(header_rows):
            header_rows.append([])
        header_rows[frame.depth].append(visible)

        if is_expanded:
            on_path.add(id(node))
            stack.append(
                _Frame(node, frame.depth, frame.parent_id, visible=visible, first_leaf=leaf_counter)
            )
            for child in reversed(node.children):
                stack.append(_Frame(child, frame.depth + 1, node.id))
        else:
            leaf_counter += 1
            visible.anchor = _anchor(visible.alignment, visible.leaf_start, visible.leaf_end)

    return VisibilityResult(
        visible_nodes=visible_nodes,
        header_rows=header_rows,
        # An empty tree still gets one column so widths never divide by zero
        leaf_count=max(leaf_counter, 1),
        anchors={n.actor_id: n.anchor for n in visible_nodes},
        spans={n.actor_id: Span(n.leaf_start, n.leaf_end + 1) for n in visible_nodes},
        node_map={n.actor_id: n for n in visible_nodes},
    )
