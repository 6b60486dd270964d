"""Structured document and injection state models."""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class DocumentType(str, Enum):
    """schema.org types the builder produces; also the dedup key."""

    ARTICLE = "Article"
    FAQ_PAGE = "FAQPage"
    CLAIM_REVIEW = "ClaimReview"


class StructuredDocument(BaseModel):
    """A typed JSON-LD payload ready for injection."""

    type_tag: DocumentType
    payload: dict[str, Any] = Field(default_factory=dict)

    def serialize(self) -> str:
        """Render the payload as indented JSON-LD text."""
        return json.dumps(self.payload, indent=2, ensure_ascii=False)


class InjectionRecord(BaseModel):
    """Publish state of one document type on a surface."""

    type_tag: DocumentType
    already_present: bool = False
    success: bool = False
    target: str | None = None
