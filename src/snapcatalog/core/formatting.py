"""Formatting utilities for domain logic."""


def state_to_color(state: str) -> str:
    """Map a local manifest state to a color name.

    Args:
        state: State string ("complete" or "partial")

    Returns:
        Color name string:
        - "complete" -> "green"
        - "partial" -> "yellow"
        - invalid -> empty string
    """
    color_map = {
        "complete": "green",
        "partial": "yellow",
    }
    return color_map.get(state, "")
