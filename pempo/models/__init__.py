"""Data models for the PEMPO embed pipeline."""

from pempo.models.chunk import Chunk, Claim, Entity, EntityType
from pempo.models.citation import (
    UNKNOWN_AUTHOR,
    CitationFormats,
    CitationMetadata,
)
from pempo.models.document import DocumentType, InjectionRecord, StructuredDocument
from pempo.models.parsed import FaqPair, PageMetadata, ParsedPage
from pempo.models.result import InjectionResults, RagMetadata, RunSummary

__all__ = [
    "UNKNOWN_AUTHOR",
    "Chunk",
    "CitationFormats",
    "CitationMetadata",
    "Claim",
    "DocumentType",
    "Entity",
    "EntityType",
    "FaqPair",
    "InjectionRecord",
    "InjectionResults",
    "PageMetadata",
    "ParsedPage",
    "RagMetadata",
    "RunSummary",
    "StructuredDocument",
]
