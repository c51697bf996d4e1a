"""seqtree -- Layout engine for sequence diagrams with collapsible actor groups."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .types import (
    ActorNode,
    Message,
    SequenceDiagramModel,
    Span,
    VisibleNode,
    VisibilityResult,
    ProjectedMessage,
    Endpoint,
    ResolvedMessage,
    LayoutOptions,
    SequenceLayout,
)
from .styles import COLUMN_WIDTH, SEQ, anchor_to_pixels, anchor_to_percent
from .expansion import (
    derive_default_expanded,
    expand_actor,
    collapse_actor,
    toggle_actor,
    set_expanded,
)
from .utils import collect_actor_ids
from .visibility import resolve_visibility
from .messages import project_messages
from .endpoints import resolve_endpoints, collect_active_actors
from .layout import compute_layout
from .parser import parse_sequence_diagram, parse_model
from .validate import ValidationIssue, ModelValidationError, validate_model, ensure_valid

__all__ = [
    "layout_mermaid",
    "compute_layout",
    "resolve_visibility",
    "project_messages",
    "resolve_endpoints",
    "collect_active_actors",
    "derive_default_expanded",
    "expand_actor",
    "collapse_actor",
    "toggle_actor",
    "set_expanded",
    "collect_actor_ids",
    "anchor_to_pixels",
    "anchor_to_percent",
    "parse_sequence_diagram",
    "parse_model",
    "validate_model",
    "ensure_valid",
    "ValidationIssue",
    "ModelValidationError",
    "ActorNode",
    "Message",
    "SequenceDiagramModel",
    "Span",
    "VisibleNode",
    "VisibilityResult",
    "ProjectedMessage",
    "Endpoint",
    "ResolvedMessage",
    "LayoutOptions",
    "SequenceLayout",
    "COLUMN_WIDTH",
    "SEQ",
]


def layout_mermaid(
    text: str,
    expanded: Iterable[str] | None = None,
    options: LayoutOptions | None = None,
) -> SequenceLayout:
    """Parse sequence diagram text and lay it out for one expansion state."""
    lines = [
        l.strip()
        for l in re.split(r"[\n;]", text)
        if l.strip() and not l.strip().startswith("%%")
    ]
    if not lines:
        raise ValueError("Empty sequence diagram")
    if not re.match(r"^sequencediagram\s*$", lines[0].lower()):
        raise ValueError(f'Expected "sequenceDiagram" header, got "{lines[0]}"')

    model = parse_sequence_diagram(lines)
    return compute_layout(model, expanded, options)
