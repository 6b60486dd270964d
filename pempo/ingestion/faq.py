"""Question heading / answer paragraph pairing for FAQ documents."""

import logging
import re

from bs4 import BeautifulSoup, Tag

from pempo.config import FaqConfig
from pempo.models.parsed import FaqPair

logger = logging.getLogger(__name__)

INTERROGATIVE_WORDS: frozenset[str] = frozenset({
    "what",
    "how",
    "why",
    "when",
    "where",
    "who",
    "which",
    "can",
    "does",
    "do",
    "is",
    "are",
    "should",
    "will",
})

# Headings that look like questions but belong to page chrome.
BOILERPLATE_PATTERNS: dict[str, re.Pattern[str]] = {
    "share": re.compile(r"\bshare\b", re.IGNORECASE),
    "subscribe": re.compile(r"\bsubscri(?:be|ption)\b", re.IGNORECASE),
    "advertisement": re.compile(r"\badvertis(?:ement|ing)\b", re.IGNORECASE),
    "newsletter": re.compile(r"\bnewsletter\b", re.IGNORECASE),
    "sign_up": re.compile(r"\bsign\s*up\b", re.IGNORECASE),
    "follow_us": re.compile(r"\bfollow\s+us\b", re.IGNORECASE),
    "related": re.compile(r"\brelated\s+(?:posts|articles|stories)\b", re.IGNORECASE),
    "comments": re.compile(r"\bcomments?\b", re.IGNORECASE),
    "cookies": re.compile(r"\bcookies?\b", re.IGNORECASE),
}

HEADING_LEVELS: frozenset[str] = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


def is_question(text: str) -> bool:
    """Return True when the text starts with an interrogative or has a '?'."""
    if "?" in text:
        return True
    words = text.split()
    return bool(words) and words[0].lower().strip(",:;") in INTERROGATIVE_WORDS


def is_boilerplate(text: str) -> bool:
    """Return True when the text matches any boilerplate pattern."""
    return any(pattern.search(text) for pattern in BOILERPLATE_PATTERNS.values())


def _collect_answer(heading: Tag, max_siblings: int) -> str:
    """Concatenate paragraph text from the siblings following a heading.

    Args:
        heading: The question heading element.
        max_siblings: Maximum number of sibling elements to inspect.

    Returns:
        The joined, trimmed answer text.
    """
    parts: list[str] = []
    sibling = heading.find_next_sibling()
    steps = 0

    while sibling is not None and steps < max_siblings:
        if sibling.name in HEADING_LEVELS:
            break
        if sibling.name == "p":
            parts.append(sibling.get_text(" ", strip=True))
        sibling = sibling.find_next_sibling()
        steps += 1

    return " ".join(part for part in parts if part).strip()


def extract_faq_pairs(
    soup: BeautifulSoup | Tag,
    config: FaqConfig | None = None,
) -> list[FaqPair]:
    """Pair question-like headings with the paragraphs that follow them.

    Args:
        soup: Parsed page (or a sub-tree of it).
        config: Pairing limits; defaults to FaqConfig().

    Returns:
        FaqPair objects in document order.
    """
    config = config or FaqConfig()
    pairs: list[FaqPair] = []

    for heading in soup.find_all(config.heading_tags):
        question = heading.get_text(" ", strip=True)
        if not question or not is_question(question) or is_boilerplate(question):
            continue

        answer = _collect_answer(heading, config.max_siblings)
        if len(answer) < config.min_answer_chars:
            logger.debug("Discarding FAQ candidate with short answer: %s", question)
            continue

        pairs.append(FaqPair(question=question, answer=answer))

    return pairs
