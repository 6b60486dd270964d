"""Citation metadata assembly.

Author and date are probed from the page's metadata sources in priority
order; the first present value wins. The three citation strings are plain
template substitutions and are always produced.
"""

import logging
import re
from datetime import datetime, timezone

from pempo.models.citation import (
    UNKNOWN_AUTHOR,
    UNKNOWN_TITLE,
    UNKNOWN_URL,
    CitationFormats,
    CitationMetadata,
)
from pempo.models.parsed import PageMetadata

logger = logging.getLogger(__name__)

# PageMetadata fields in priority order.
AUTHOR_SOURCES: tuple[str, ...] = ("meta_author", "structured_author", "byline")
DATE_SOURCES: tuple[str, ...] = ("published_time", "meta_date", "time_element")

APA_TEMPLATE = "{author}. ({year}). {title}. Retrieved from {url}"
CHICAGO_TEMPLATE = '{author}. "{title}." Published {long_date}. {url}.'
MLA_TEMPLATE = '{author}. "{title}." {short_date}, {url}.'

NO_DATE = "n.d."

# Month forms used in MLA dates.
MLA_MONTHS: tuple[str, ...] = (
    "Jan.", "Feb.", "Mar.", "Apr.", "May", "June",
    "July", "Aug.", "Sept.", "Oct.", "Nov.", "Dec.",
)

EXCERPT_CHARS = 200

_YEAR = re.compile(r"\b(\d{4})\b")


def first_present(metadata: PageMetadata, fields: tuple[str, ...]) -> str | None:
    """Return the first non-empty value among ``fields``."""
    for field in fields:
        value = getattr(metadata, field)
        if value and value.strip():
            return value.strip()
    return None


def parse_date(value: str) -> datetime | None:
    """Parse an ISO 8601 date string, returning None when it is not one."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _date_parts(value: str) -> dict[str, str]:
    """Year, long date and MLA short date for a publish date string."""
    parsed = parse_date(value)
    if parsed is not None:
        return {
            "year": str(parsed.year),
            "long_date": f"{parsed:%B} {parsed.day}, {parsed.year}",
            "short_date": f"{parsed.day} {MLA_MONTHS[parsed.month - 1]} {parsed.year}",
        }

    logger.debug("Unparsable publish date %r, degrading citation dates", value)
    match = _YEAR.search(value)
    year = match.group(1) if match else NO_DATE
    return {"year": year, "long_date": value, "short_date": value}


def format_citations(author: str, title: str, url: str, publish_date: str) -> CitationFormats:
    """Fill the APA, Chicago and MLA templates.

    Args:
        author: Author name or the unknown-author sentinel.
        title: Page title.
        url: Source URL.
        publish_date: Publish date string (ISO 8601 preferred).

    Returns:
        CitationFormats with all three strings.
    """
    values = {"author": author, "title": title, "url": url, **_date_parts(publish_date)}
    return CitationFormats(
        apa=APA_TEMPLATE.format(**values),
        chicago=CHICAGO_TEMPLATE.format(**values),
        mla=MLA_TEMPLATE.format(**values),
    )


def build_citation(
    metadata: PageMetadata,
    span_text: str = "",
    now: datetime | None = None,
) -> CitationMetadata:
    """Derive citation metadata for a page.

    Args:
        metadata: Metadata sources read from the page.
        span_text: The cited text; its leading characters become the excerpt.
        now: Extraction timestamp, defaulting to the current UTC time.

    Returns:
        CitationMetadata with sentinel values for absent fields.
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    author = first_present(metadata, AUTHOR_SOURCES) or UNKNOWN_AUTHOR
    publish_date = first_present(metadata, DATE_SOURCES) or timestamp
    last_modified = (metadata.modified_time or "").strip() or timestamp
    title = metadata.title.strip() or UNKNOWN_TITLE
    url = metadata.url.strip() or UNKNOWN_URL

    return CitationMetadata(
        id=f"{metadata.url.strip()}#citation",
        source_url=url,
        title=title,
        author=author,
        publish_date=publish_date,
        last_modified=last_modified,
        formats=format_citations(author, title, url, publish_date),
        excerpt=span_text.strip()[:EXCERPT_CHARS],
    )
