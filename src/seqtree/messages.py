from __future__ import annotations

import logging
from collections.abc import Sequence

from .styles import SEQ
from .types import LayoutOptions, Message, ProjectedMessage, VisibilityResult

logger = logging.getLogger(__name__)


def project_messages(
    messages: Sequence[Message],
    visibility: VisibilityResult,
    options: LayoutOptions | None = None,
) -> list[ProjectedMessage]:
    """Keep the messages whose two endpoints are visible and stack them in rows.

    A message addressed to an actor hidden inside a collapsed group, or to an
    id that is not in the tree at all, is dropped rather than rolled up to the
    group. Survivors are ordered by (row_index hint, input position) and then
    renumbered densely from 0.
    """
    if options is None:
        options = LayoutOptions()
    row_height = options.row_height if options.row_height is not None else SEQ["row_height"]
    padding = (
        options.vertical_padding
        if options.vertical_padding is not None
        else SEQ["vertical_padding"]
    )

    visible = visibility.node_map
    candidates: list[tuple[int, int, Message]] = []
    for index, msg in enumerate(messages):
        if msg.from_ not in visible or msg.to not in visible:
            continue
        hint = msg.row_index if msg.row_index is not None else index
        candidates.append((hint, index, msg))

    dropped = len(messages) - len(candidates)
    if dropped:
        logger.debug("Dropped %d of %d messages with hidden endpoints", dropped, len(messages))

    candidates.sort(key=lambda c: (c[0], c[1]))
    return [
        ProjectedMessage(message=msg, row_index=row, y=padding + row * row_height)
        for row, (_, _, msg) in enumerate(candidates)
    ]
