from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from .types import ActorNode

logger = logging.getLogger(__name__)


def iter_actor_tree(
    actors: Sequence[ActorNode],
) -> Iterator[tuple[ActorNode, int, ActorNode | None]]:
    """Yield (node, depth, parent) for every actor in pre-order.

    Uses an explicit stack so arbitrarily deep trees cannot exhaust the
    recursion limit. A node object reached a second time (a shared subtree
    or a node nested inside itself) is skipped instead of revisited.
    """
    seen: set[int] = set()
    stack: list[tuple[ActorNode, int, ActorNode | None]] = [
        (node, 0, None) for node in reversed(actors)
    ]
    while stack:
        node, depth, parent = stack.pop()
        if id(node) in seen:
            logger.warning("Actor %r appears more than once in the tree; skipping", node.id)
            continue
        seen.add(id(node))
        yield node, depth, parent
        for child in reversed(node.children):
            stack.append((child, depth + 1, node))


def collect_actor_ids(actors: Sequence[ActorNode]) -> list[str]:
    """Every actor id in the tree, in document order."""
    return [node.id for node, _, _ in iter_actor_tree(actors)]
