from __future__ import annotations

from collections.abc import Iterable

from .endpoints import collect_active_actors, resolve_endpoints
from .messages import project_messages
from .styles import COLUMN_WIDTH, SEQ
from .types import LayoutOptions, SequenceDiagramModel, SequenceLayout
from .visibility import resolve_visibility

# ============================================================================
# Sequence tree layout
#
# Pipeline, recomputed from scratch on every call:
#   1. Resolve visible actors, columns and anchors for the expansion set
#   2. Filter messages to visible endpoints and stack them in dense rows
#   3. Resolve arrow ends (group boundary substitution + lifeline continuity)
#   4. Size the canvas
# ============================================================================


def compute_layout(
    model: SequenceDiagramModel,
    expanded: Iterable[str] | None = None,
    options: LayoutOptions | None = None,
) -> SequenceLayout:
    """Lay out a diagram for one expansion state.

    ``expanded`` is a snapshot of the expanded group ids; None means the
    tree's default expansion.
    """
    if options is None:
        options = LayoutOptions()

    visibility = resolve_visibility(model.actors, expanded)
    projected = project_messages(model.messages, visibility, options)
    resolved = resolve_endpoints(projected, visibility)

    row_height = options.row_height if options.row_height is not None else SEQ["row_height"]
    padding = (
        options.vertical_padding
        if options.vertical_padding is not None
        else SEQ["vertical_padding"]
    )

    return SequenceLayout(
        visibility=visibility,
        messages=projected,
        resolved=resolved,
        active_actors=collect_active_actors(resolved),
        column_width=options.column_width if options.column_width is not None else COLUMN_WIDTH,
        header_row_height=(
            options.header_row_height
            if options.header_row_height is not None
            else SEQ["header_row_height"]
        ),
        # Always leave room for one row so an empty diagram keeps a visible canvas
        message_area_height=padding * 2 + max(len(projected), 1) * row_height,
    )
