"""Heuristic extractors: token estimate, entities and claims."""

from pempo.extraction.claims import CLAIM_PATTERNS, extract_claims, split_sentences
from pempo.extraction.entities import ENTITY_PATTERNS, extract_entities
from pempo.extraction.tokens import estimate_tokens

__all__ = [
    "CLAIM_PATTERNS",
    "ENTITY_PATTERNS",
    "estimate_tokens",
    "extract_claims",
    "extract_entities",
    "split_sentences",
]
