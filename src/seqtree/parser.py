from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .types import ActorNode, Message, SequenceDiagramModel

# ============================================================================
# Model loaders
#
# parse_sequence_diagram reads a Mermaid-flavoured text form where nested
# "box" blocks declare actor groups:
#
#   sequenceDiagram
#   box api as API [right]
#     participant gw as Gateway
#     box svc as Services [collapsed]
#       participant auth as Auth
#     end
#   end
#   gw->>auth: Verify token
#
# Supported syntax:
#   box ID [as Label] [options]        open a group, closed by "end"
#   participant ID [as Label] [options]
#   actor ID [as Label] [options]
#   A->>B: Solid arrow
#   A-->>B: Dashed arrow
#   A-)B: Open arrow
#   A--)B: Dashed open arrow
#   A->>+B / A-->>-B: activation marks (accepted, ignored)
#   loop/alt/opt/par/critical/break/rect ... end: blocks (structure only;
#   their "end" closes the block, not the enclosing box)
#
# Options are a comma-separated list of left, center, right, collapsed,
# expanded.
#
# parse_model reads the same structure from plain dict/JSON data.
# ============================================================================

_BOX_RE = re.compile(r"^box\s+(\S+?)(?:\s+as\s+(.+?))?(?:\s*\[([^\]]*)\])?$")
_ACTOR_RE = re.compile(r"^(?:participant|actor)\s+(\S+?)(?:\s+as\s+(.+?))?(?:\s*\[([^\]]*)\])?$")
_MSG_RE = re.compile(r"^(\S+?)\s*(--?>?>|--?[)x]|--?>>|--?>)\s*([+-]?)(\S+?)\s*:\s*(.+)$")
_SIMPLE_MSG_RE = re.compile(
    r"^(\S+?)\s*(->>|-->>|-\)|--\)|-x|--x|->|-->)\s*([+-]?)(\S+?)\s*:\s*(.+)$"
)
_BLOCK_RE = re.compile(r"^(loop|alt|opt|par|critical|break|rect)(?:\s+(.*))?$")

_ALIGNMENTS = ("left", "center", "right")


def parse_sequence_diagram(lines: list[str]) -> SequenceDiagramModel:
    """Parse a sequence diagram with nested actor groups.

    Expects the first line to be "sequenceDiagram". Raises ValueError on an
    unmatched "end" or a "box" or block that is never closed.
    """
    if not lines:
        raise ValueError("Empty sequence diagram")

    model = SequenceDiagramModel()

    # Track every declared or referenced actor id
    actor_ids: set[str] = set()
    # Open boxes and blocks, innermost last; None marks a loop/alt/... block
    box_stack: list[ActorNode | None] = []

    for i in range(1, len(lines)):
        line = lines[i]

        # --- Group open ---
        # "box api as API [right, collapsed]"
        box_match = _BOX_RE.match(line)
        if box_match:
            group = _make_actor(box_match)
            actor_ids.add(group.id)
            _attach(model, box_stack, group)
            box_stack.append(group)
            continue

        # --- Block open: loop, alt, opt, par, critical, break, rect ---
        if _BLOCK_RE.match(line):
            box_stack.append(None)
            continue

        # --- Group / block close ---
        if line == "end":
            if not box_stack:
                raise ValueError(f"Unexpected 'end' on line {i + 1}")
            box_stack.pop()
            continue

        # --- Participant / Actor declaration ---
        actor_match = _ACTOR_RE.match(line)
        if actor_match:
            actor = _make_actor(actor_match)
            if actor.id not in actor_ids:
                actor_ids.add(actor.id)
                _attach(model, box_stack, actor)
            continue

        # --- Message ---
        # Format: FROM ARROW TO: LABEL
        msg_match = _MSG_RE.match(line) or _SIMPLE_MSG_RE.match(line)
        if msg_match:
            _parse_message(model, actor_ids, msg_match)
            continue

        # Anything else (notes, else/and dividers, activate lines) only affects rendering

    if box_stack:
        innermost = box_stack[-1]
        if innermost is None:
            raise ValueError("Unclosed block")
        raise ValueError(f"Unclosed box {innermost.id!r}")

    return model


def _make_actor(match: re.Match[str]) -> ActorNode:
    id_ = match.group(1)
    label_group = match.group(2)
    actor = ActorNode(id=id_, label=label_group.strip() if label_group else id_)

    options = [o.strip().lower() for o in (match.group(3) or "").split(",") if o.strip()]
    for option in options:
        if option in _ALIGNMENTS:
            actor.alignment = option  # type: ignore[assignment]
        elif option == "collapsed":
            actor.default_expanded = False
        elif option == "expanded":
            actor.default_expanded = True
    return actor


def _attach(
    model: SequenceDiagramModel,
    box_stack: list[ActorNode | None],
    actor: ActorNode,
) -> None:
    boxes = [box for box in box_stack if box is not None]
    if boxes:
        boxes[-1].children.append(actor)
    else:
        model.actors.append(actor)


def _parse_message(
    model: SequenceDiagramModel,
    actor_ids: set[str],
    match: re.Match[str],
) -> None:
    """Parse a message match and append it to the model."""
    from_ = match.group(1)
    arrow = match.group(2)
    to = match.group(4)
    label = match.group(5).strip()

    # Messages may name actors never declared; they become top-level participants
    for id_ in (from_, to):
        if id_ not in actor_ids:
            actor_ids.add(id_)
            model.actors.append(ActorNode(id=id_, label=id_))

    # ">>" = filled arrow, ")" or ">" alone = open arrow, "x" = cross (treat as filled)
    line_style = "dashed" if arrow.startswith("--") else "solid"
    arrow_head = "filled" if (">>" in arrow or "x" in arrow) else "open"

    model.messages.append(
        Message(
            id=f"m{len(model.messages) + 1}",
            from_=from_,
            to=to,
            label=label,
            line_style=line_style,  # type: ignore[arg-type]
            arrow_head=arrow_head,  # type: ignore[arg-type]
        )
    )


# ============================================================================
# Dict / JSON loader
# ============================================================================


def _require(data: Mapping[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise ValueError(f"{what} is missing required key {key!r}")
    return data[key]


def _parse_actor(data: Mapping[str, Any]) -> ActorNode:
    actor_id = str(_require(data, "actorId", "Actor"))
    alignment = data.get("alignment", "center")
    default_expanded = data.get("defaultExpanded")
    return ActorNode(
        id=actor_id,
        label=str(data.get("label", actor_id)),
        children=[_parse_actor(child) for child in data.get("children") or []],
        alignment=alignment if alignment in _ALIGNMENTS else "center",
        default_expanded=None if default_expanded is None else bool(default_expanded),
        class_name=data.get("className"),
        region_class_name=data.get("regionClassName"),
    )


def _parse_model_message(data: Mapping[str, Any]) -> Message:
    row_index = data.get("rowIndex")
    return Message(
        id=str(_require(data, "messageId", "Message")),
        from_=str(_require(data, "fromActorId", "Message")),
        to=str(_require(data, "toActorId", "Message")),
        label=str(data.get("label", "")),
        row_index=None if row_index is None else int(row_index),
        class_name=data.get("className"),
        payload=dict(data.get("payload") or {}),
    )


def parse_model(data: Mapping[str, Any]) -> SequenceDiagramModel:
    """Build a model from dict data using the camelCase keys of the JSON form."""
    return SequenceDiagramModel(
        actors=[_parse_actor(a) for a in data.get("actors") or []],
        messages=[_parse_model_message(m) for m in data.get("messages") or []],
        id=data.get("id"),
        title=data.get("title"),
        description=data.get("description"),
    )
