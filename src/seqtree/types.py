from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

# ============================================================================
# Sequence tree types
#
# Models the input diagram (a tree of actors plus a flat list of messages)
# and the derived structures produced by each layout stage. Horizontal
# positions are in leaf-column units; see styles.anchor_to_pixels.
# ============================================================================

# ============================================================================
# Input model -- supplied by the host application, never mutated here
# ============================================================================

ActorAlignment = Literal["left", "center", "right"]
LineStyle = Literal["solid", "dashed"]
ArrowHead = Literal["filled", "open"]
Direction = Literal[1, -1]


@dataclass(slots=True)
class ActorNode:
    id: str
    label: str
    # Ordered child actors; empty for a plain participant
    children: list[ActorNode] = field(default_factory=list)
    # Where the lifeline sits inside the node's span
    alignment: ActorAlignment = "center"
    # None resolves to True when the node has children
    default_expanded: bool | None = None
    # Opaque style hints for renderers
    class_name: str | None = None
    region_class_name: str | None = None

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0


@dataclass(slots=True)
class Message:
    id: str
    from_: str
    to: str
    label: str
    # Explicit ordering hint; messages without one keep document order
    row_index: int | None = None
    line_style: LineStyle = "solid"
    arrow_head: ArrowHead = "filled"
    class_name: str | None = None
    # Arbitrary renderer payload (metadata, badges, ...)
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_self(self) -> bool:
        return self.from_ == self.to


@dataclass(slots=True)
class SequenceDiagramModel:
    """A diagram: the actor tree plus the messages exchanged between actors."""
    actors: list[ActorNode] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    id: str | None = None
    title: str | None = None
    description: str | None = None


# ============================================================================
# Visibility -- which actors get a column for the current expansion set
# ============================================================================


@dataclass(slots=True)
class Span:
    """Half-open range of leaf columns [start, end)."""
    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(slots=True)
class VisibleNode:
    actor_id: str
    label: str
    # Root actors have depth 0
    depth: int
    parent_actor_id: str | None
    has_children: bool
    # True only for groups whose children are shown as separate columns
    expanded: bool
    # Inclusive column range occupied by this node
    leaf_start: int
    leaf_end: int
    # Column coordinate of the lifeline
    anchor: float
    alignment: ActorAlignment = "center"
    class_name: str | None = None
    region_class_name: str | None = None

    @property
    def leaf_span(self) -> int:
        return self.leaf_end - self.leaf_start + 1

    @property
    def is_leaf(self) -> bool:
        """True when the node occupies a single column (a participant or a collapsed group)."""
        return not self.expanded


@dataclass(slots=True)
class VisibilityResult:
    # Every visible node in document order (a group precedes its children)
    visible_nodes: list[VisibleNode] = field(default_factory=list)
    # header_rows[depth] lists the visible nodes at that depth, in order
    header_rows: list[list[VisibleNode]] = field(default_factory=list)
    leaf_count: int = 1
    anchors: dict[str, float] = field(default_factory=dict)
    spans: dict[str, Span] = field(default_factory=dict)
    node_map: dict[str, VisibleNode] = field(default_factory=dict)

    @property
    def leaf_nodes(self) -> list[VisibleNode]:
        """Single-column nodes in column order."""
        return sorted(
            (n for n in self.visible_nodes if n.is_leaf),
            key=lambda n: n.leaf_start,
        )


# ============================================================================
# Messages -- projected rows and resolved arrow endpoints
# ============================================================================


@dataclass(slots=True)
class ProjectedMessage:
    message: Message
    # Dense, 0-based row among the visible messages
    row_index: int
    # Vertical position of the row
    y: float


@dataclass(slots=True)
class Endpoint:
    """The visible actor an arrow end attaches to, after group substitution."""
    actor_id: str
    anchor: float


@dataclass(slots=True)
class ResolvedMessage:
    message: Message
    row_index: int
    y: float
    from_resolved: Endpoint
    to_resolved: Endpoint
    # Drawn x of the arrow tail and head (column units)
    from_anchor: float
    to_anchor: float
    # +1 when the arrow points right (or is a self-message), -1 otherwise
    direction: Direction

    @property
    def rolled(self) -> bool:
        """True when either end was moved onto a boundary leaf of an expanded group."""
        return (
            self.from_resolved.actor_id != self.message.from_
            or self.to_resolved.actor_id != self.message.to
        )


# ============================================================================
# Layout options and combined output
# ============================================================================


@dataclass(slots=True)
class LayoutOptions:
    column_width: float | None = None
    row_height: float | None = None
    vertical_padding: float | None = None
    header_row_height: float | None = None


@dataclass(slots=True)
class SequenceLayout:
    visibility: VisibilityResult
    messages: list[ProjectedMessage] = field(default_factory=list)
    resolved: list[ResolvedMessage] = field(default_factory=list)
    # Actor ids that are an endpoint of at least one drawn arrow
    active_actors: set[str] = field(default_factory=set)
    column_width: float = 0
    header_row_height: float = 0
    message_area_height: float = 0

    @property
    def leaf_count(self) -> int:
        return self.visibility.leaf_count

    @property
    def width(self) -> float:
        return self.visibility.leaf_count * self.column_width
