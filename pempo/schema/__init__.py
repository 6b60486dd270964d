"""Structured-document builders."""

from pempo.schema.builder import (
    build_article_document,
    build_claim_review_document,
    build_faq_document,
    build_rag_metadata,
    citation_readiness,
)

__all__ = [
    "build_article_document",
    "build_claim_review_document",
    "build_faq_document",
    "build_rag_metadata",
    "citation_readiness",
]
