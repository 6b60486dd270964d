"""Pattern-based entity candidates.

This is deliberately not a named-entity recognizer. Capitalized phrases are
reported as ORGANIZATION candidates with a high false-positive rate.
"""

import re
from typing import NamedTuple

from pempo.models.chunk import Entity, EntityType


class EntityPattern(NamedTuple):
    """One row of the entity pattern table."""

    name: str
    entity_type: EntityType
    regex: re.Pattern[str]
    confidence: float


ENTITY_PATTERNS: list[EntityPattern] = [
    EntityPattern(
        name="number",
        entity_type=EntityType.NUMBER,
        regex=re.compile(r"\b\d+(?:,\d{3})*(?:\.\d+)?%?"),
        confidence=0.9,
    ),
    EntityPattern(
        name="capitalized_phrase",
        entity_type=EntityType.ORGANIZATION,
        regex=re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b"),
        confidence=0.5,
    ),
]

ORGANIZATION_STOPWORDS: frozenset[str] = frozenset({
    "The",
    "This",
    "That",
    "These",
    "Those",
    "There",
    "Their",
    "They",
    "With",
    "When",
    "Where",
    "What",
    "Which",
    "How",
    "Why",
    "However",
})

MIN_ORGANIZATION_CHARS = 4


def _is_excluded(entity_type: EntityType, text: str) -> bool:
    if entity_type is not EntityType.ORGANIZATION:
        return False
    return len(text) < MIN_ORGANIZATION_CHARS or text in ORGANIZATION_STOPWORDS


def extract_entities(text: str) -> list[Entity]:
    """Extract NUMBER and ORGANIZATION candidates from a text span.

    Every occurrence is reported (no deduplication) and results are ordered
    by their position in ``text``.

    Args:
        text: The span to scan.

    Returns:
        List of Entity objects, empty when nothing matches.
    """
    found: list[tuple[int, Entity]] = []

    for pattern in ENTITY_PATTERNS:
        for match in pattern.regex.finditer(text):
            value = match.group()
            if _is_excluded(pattern.entity_type, value):
                continue
            found.append((
                match.start(),
                Entity(
                    text=value,
                    type=pattern.entity_type,
                    confidence=pattern.confidence,
                ),
            ))

    found.sort(key=lambda item: item[0])
    return [entity for _, entity in found]
