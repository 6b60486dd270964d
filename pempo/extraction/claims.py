"""Factual-claim detection over sentence splits."""

import re

from pempo.models.chunk import Claim

# Indicator patterns, matched case-insensitively against each sentence.
CLAIM_PATTERNS: dict[str, re.Pattern[str]] = {
    "according_to": re.compile(r"according to", re.IGNORECASE),
    "research_shows": re.compile(r"research shows", re.IGNORECASE),
    "studies_indicate": re.compile(r"studies indicate", re.IGNORECASE),
    "data_reveals": re.compile(r"data reveals", re.IGNORECASE),
    "statistics_show": re.compile(r"statistics show", re.IGNORECASE),
    "percentage": re.compile(r"\d+(?:\.\d+)?%"),
    "increased_by": re.compile(r"increased by", re.IGNORECASE),
    "decreased_by": re.compile(r"decreased by", re.IGNORECASE),
    "found_that": re.compile(r"found that", re.IGNORECASE),
    "reported_that": re.compile(r"reported that", re.IGNORECASE),
}

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")

MIN_CLAIM_CHARS = 20


def split_sentences(text: str) -> list[str]:
    """Split text on ``. ! ?`` and return the trimmed, non-empty pieces."""
    return [s.strip() for s in SENTENCE_BOUNDARY.split(text) if s.strip()]


def match_claim_patterns(sentence: str) -> list[str]:
    """Return the names of every indicator pattern found in ``sentence``."""
    return [name for name, pattern in CLAIM_PATTERNS.items() if pattern.search(sentence)]


def extract_claims(text: str, min_chars: int = MIN_CLAIM_CHARS) -> list[Claim]:
    """Flag sentences that read as citable factual assertions.

    A sentence qualifies when its trimmed length exceeds ``min_chars`` and
    at least one indicator pattern matches. Qualifying sentences are always
    citation-ready.

    Args:
        text: The span to scan.
        min_chars: Length a sentence must exceed to be considered.

    Returns:
        Claims in sentence order.
    """
    claims: list[Claim] = []

    for sentence in split_sentences(text):
        if len(sentence) <= min_chars:
            continue
        matched = match_claim_patterns(sentence)
        if matched:
            claims.append(
                Claim(text=sentence, citation_ready=True, matched_patterns=matched)
            )

    return claims
