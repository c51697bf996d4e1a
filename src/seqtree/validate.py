from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Literal

import networkx as nx

from .types import SequenceDiagramModel

# ============================================================================
# Model validation
#
# The layout functions never raise on malformed input; they drop what they
# cannot place. This pass is the strict counterpart a host can run before
# layout to report problems to the user:
#   - duplicate actor ids and actors nested inside themselves
#   - duplicate message ids and messages naming unknown actors
#   - explicit row indices shared by several messages
#   - optionally, message chains that are not linear (each message must
#     leave from the previous message's target)
# ============================================================================

Severity = Literal["error", "warning"]


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: Severity
    message: str
    actor_id: str | None = None
    message_id: str | None = None


class ModelValidationError(ValueError):
    """Raised by ensure_valid when the model has error-level issues."""

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        summary = "; ".join(issue.message for issue in issues)
        super().__init__(f"Invalid sequence diagram: {summary}")


def _actor_graph(model: SequenceDiagramModel) -> tuple[nx.DiGraph, Counter[str]]:
    """Build the parent -> child id graph and count id occurrences.

    A node object met again (shared or self-nested) still contributes its
    incoming edge but is not descended into, so the walk always terminates.
    """
    graph: nx.DiGraph = nx.DiGraph()
    counts: Counter[str] = Counter()
    seen: set[int] = set()
    stack = [(node, None) for node in reversed(model.actors)]
    while stack:
        node, parent_id = stack.pop()
        counts[node.id] += 1
        graph.add_node(node.id)
        if parent_id is not None:
            graph.add_edge(parent_id, node.id)
        if id(node) in seen:
            continue
        seen.add(id(node))
        for child in reversed(node.children):
            stack.append((child, node.id))
    return graph, counts


def validate_model(
    model: SequenceDiagramModel,
    require_linear: bool = False,
) -> list[ValidationIssue]:
    """Check a model for problems the layout engine silently tolerates."""
    issues: list[ValidationIssue] = []

    graph, counts = _actor_graph(model)
    for actor_id, count in counts.items():
        if count > 1:
            issues.append(
                ValidationIssue(
                    code="duplicate-actor-id",
                    severity="error",
                    message=f"Actor id {actor_id!r} is used {count} times",
                    actor_id=actor_id,
                )
            )

    for cycle in sorted(nx.simple_cycles(graph), key=lambda c: (len(c), c)):
        path = " -> ".join([*cycle, cycle[0]])
        issues.append(
            ValidationIssue(
                code="actor-cycle",
                severity="error",
                message=f"Actor {cycle[0]!r} is nested inside itself ({path})",
                actor_id=cycle[0],
            )
        )

    message_counts = Counter(msg.id for msg in model.messages)
    for message_id, count in message_counts.items():
        if count > 1:
            issues.append(
                ValidationIssue(
                    code="duplicate-message-id",
                    severity="error",
                    message=f"Message id {message_id!r} is used {count} times",
                    message_id=message_id,
                )
            )

    for msg in model.messages:
        for actor_id in dict.fromkeys((msg.from_, msg.to)):
            if actor_id not in counts:
                issues.append(
                    ValidationIssue(
                        code="unknown-actor",
                        severity="error",
                        message=f"Message {msg.id!r} references unknown actor {actor_id!r}",
                        actor_id=actor_id,
                        message_id=msg.id,
                    )
                )

    rows: dict[int, str] = {}
    for msg in model.messages:
        if msg.row_index is None:
            continue
        if msg.row_index in rows:
            issues.append(
                ValidationIssue(
                    code="duplicate-row-index",
                    severity="warning",
                    message=(
                        f"Message {msg.id!r} shares row_index {msg.row_index} "
                        f"with {rows[msg.row_index]!r}"
                    ),
                    message_id=msg.id,
                )
            )
        else:
            rows[msg.row_index] = msg.id

    if require_linear:
        for prev, msg in zip(model.messages, model.messages[1:]):
            if msg.from_ != prev.to:
                issues.append(
                    ValidationIssue(
                        code="non-linear",
                        severity="error",
                        message=(
                            f"Message {msg.id!r} starts at {msg.from_!r} but the previous "
                            f"message ends at {prev.to!r}"
                        ),
                        actor_id=msg.from_,
                        message_id=msg.id,
                    )
                )

    return issues


def ensure_valid(model: SequenceDiagramModel, require_linear: bool = False) -> None:
    """Raise ModelValidationError if validate_model reports any error."""
    errors = [
        issue
        for issue in validate_model(model, require_linear=require_linear)
        if issue.severity == "error"
    ]
    if errors:
        raise ModelValidationError(errors)
