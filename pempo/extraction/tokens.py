"""Token budget estimation."""

import math

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate token count for a text string.

    Uses a fixed 4-characters-per-token ratio. This is a budget heuristic,
    not a tokenizer, and must stay stable so chunk boundaries are
    reproducible.

    Args:
        text: The text to estimate tokens for.

    Returns:
        ``ceil(len(text) / 4)``.
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)
