from __future__ import annotations

# ============================================================================
# Column metrics -- horizontal positions are expressed in leaf-column units.
# ============================================================================

# Width of one leaf column in px
COLUMN_WIDTH = 140


def anchor_to_pixels(anchor: float, column_width: float = COLUMN_WIDTH) -> float:
    """Convert a column-unit anchor to a px offset from the left edge."""
    return anchor * column_width


def anchor_to_percent(anchor: float, leaf_count: int) -> float:
    """Convert a column-unit anchor to a percentage of the canvas width."""
    return anchor / max(leaf_count, 1) * 100


# ============================================================================
# Vertical metrics -- message rows and header grid
# ============================================================================

SEQ = {
    # Vertical space per message row
    "row_height": 56,
    # Space above the first row and below the last one
    "vertical_padding": 24,
    # Height of one header grid row (one row per tree depth)
    "header_row_height": 40,
}
