"""Parsed page data models handed to the pipeline by the page parser."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class PageMetadata(BaseModel):
    """Raw citation-relevant values found on a page.

    Each field holds the value of one metadata source, or ``None`` when the
    page does not carry it. The citation assembler decides precedence.
    """

    url: str = ""
    title: str = ""
    meta_author: str | None = None  # <meta name="author">
    structured_author: str | None = None  # JSON-LD "author"
    byline: str | None = None  # [rel=author], .byline, .author
    published_time: str | None = None  # <meta property="article:published_time">
    meta_date: str | None = None  # <meta name="date">
    time_element: str | None = None  # <time datetime="...">
    modified_time: str | None = None  # <meta property="article:modified_time">


class FaqPair(BaseModel):
    """A question-like heading and the paragraph text that follows it."""

    question: str
    answer: str
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ParsedPage(BaseModel):
    """The result of parsing a rendered HTML page.

    ``raw_text`` is the body content with paragraphs separated by blank
    lines, ready for chunking.
    """

    url: str = ""
    title: str = ""
    raw_text: str = ""
    summary: str = ""
    headings: list[str] = Field(default_factory=list)
    metadata: PageMetadata = Field(default_factory=PageMetadata)
    faq_pairs: list[FaqPair] = Field(default_factory=list)
    source_path: str = ""
