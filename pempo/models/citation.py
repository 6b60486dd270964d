"""Citation metadata models."""

from pydantic import BaseModel, Field

UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_TITLE = "Untitled"
UNKNOWN_URL = "Unknown URL"


class CitationFormats(BaseModel):
    """Formatted citation strings."""

    apa: str
    chicago: str
    mla: str


class CitationMetadata(BaseModel):
    """Citation data derived once per run and referenced by ``id``."""

    id: str = "#citation"
    source_url: str = UNKNOWN_URL
    title: str = UNKNOWN_TITLE
    author: str = UNKNOWN_AUTHOR
    publish_date: str
    last_modified: str
    formats: CitationFormats
    excerpt: str = Field(default="", description="Leading text of the cited span")
