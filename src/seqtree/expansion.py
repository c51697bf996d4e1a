from __future__ import annotations

from collections.abc import Iterable, Sequence

from .types import ActorNode
from .utils import iter_actor_tree

# ============================================================================
# Expansion sets
#
# The set of expanded group ids is owned by the caller. These helpers never
# mutate their argument: each returns a fresh frozenset so a controller can
# keep the previous snapshot around while a new layout is computed.
# ============================================================================


def derive_default_expanded(actors: Sequence[ActorNode]) -> frozenset[str]:
    """Ids of every group whose default_expanded resolves true.

    Nested groups are included even when an ancestor starts collapsed, so
    expanding that ancestor later reveals them in their default state.
    """
    return frozenset(
        node.id
        for node, _, _ in iter_actor_tree(actors)
        if node.has_children and (node.default_expanded is None or node.default_expanded)
    )


def expand_actor(expanded: Iterable[str], actor_id: str) -> frozenset[str]:
    return frozenset(expanded) | {actor_id}


def collapse_actor(expanded: Iterable[str], actor_id: str) -> frozenset[str]:
    return frozenset(expanded) - {actor_id}


def toggle_actor(expanded: Iterable[str], actor_id: str) -> frozenset[str]:
    current = frozenset(expanded)
    if actor_id in current:
        return current - {actor_id}
    return current | {actor_id}


def set_expanded(actor_ids: Iterable[str]) -> frozenset[str]:
    return frozenset(actor_ids)
