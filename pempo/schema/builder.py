"""schema.org JSON-LD document builders."""

from datetime import datetime, timezone
from typing import Any

from pempo.models.chunk import Chunk, Claim
from pempo.models.citation import UNKNOWN_AUTHOR, CitationMetadata
from pempo.models.document import DocumentType, StructuredDocument
from pempo.models.parsed import FaqPair, ParsedPage
from pempo.models.result import RagMetadata

SCHEMA_CONTEXT = "https://schema.org"
MAX_REVIEW_CLAIMS = 5


def citation_readiness(chunks: list[Chunk]) -> int:
    """Percentage of chunks marked citation-ready, 0 for no chunks."""
    if not chunks:
        return 0
    ready = sum(1 for chunk in chunks if chunk.citation_ready)
    return round(100 * ready / len(chunks))


def _citation_block(citation: CitationMetadata) -> dict[str, Any]:
    """The shared citation object, with all three formats and the excerpt."""
    return {
        "@id": citation.id,
        "author": citation.author,
        "datePublished": citation.publish_date,
        "url": citation.source_url,
        "apa": citation.formats.apa,
        "chicago": citation.formats.chicago,
        "mla": citation.formats.mla,
        "excerpt": citation.excerpt,
    }


def build_article_document(
    chunks: list[Chunk],
    citation: CitationMetadata,
    description: str = "",
    now: datetime | None = None,
) -> StructuredDocument:
    """Build the Article document embedding every chunk.

    Args:
        chunks: Chunks in emission order.
        citation: The run's citation metadata.
        description: Short page summary.
        now: Modification timestamp, defaulting to the current UTC time.

    Returns:
        An Article StructuredDocument.
    """
    modified = (now or datetime.now(timezone.utc)).isoformat()

    parts = [
        {
            "@type": "WebPageElement",
            "@id": f"{citation.source_url}#chunk-{chunk.id}",
            "position": chunk.id,
            "text": chunk.text,
            "tokenCount": chunk.token_count,
            "mentions": [entity.text for entity in chunk.entities],
            "citationReady": chunk.citation_ready,
            "citation": {"@id": citation.id},
        }
        for chunk in chunks
    ]

    payload = {
        "@context": SCHEMA_CONTEXT,
        "@type": DocumentType.ARTICLE.value,
        "headline": citation.title,
        "author": {"@type": "Person", "name": citation.author},
        "datePublished": citation.publish_date,
        "dateModified": modified,
        "mainEntityOfPage": citation.source_url,
        "description": description,
        "citation": _citation_block(citation),
        "hasPart": parts,
        "citationReadiness": citation_readiness(chunks),
    }
    return StructuredDocument(type_tag=DocumentType.ARTICLE, payload=payload)


def build_faq_document(
    pairs: list[FaqPair],
    author: str = UNKNOWN_AUTHOR,
) -> StructuredDocument | None:
    """Build a FAQPage document from heading/answer pairs.

    Each answer carries a citation block with the page author and the time
    the pair was extracted.

    Args:
        pairs: Pairs that survived heading filtering.
        author: Page author for the citation blocks.

    Returns:
        A FAQPage StructuredDocument, or None when there are no pairs.
    """
    if not pairs:
        return None

    questions = [
        {
            "@type": "Question",
            "name": pair.question,
            "acceptedAnswer": {
                "@type": "Answer",
                "text": pair.answer,
                "citation": {
                    "author": author,
                    "dateCreated": pair.extracted_at.isoformat(),
                },
            },
        }
        for pair in pairs
    ]

    payload = {
        "@context": SCHEMA_CONTEXT,
        "@type": DocumentType.FAQ_PAGE.value,
        "mainEntity": questions,
    }
    return StructuredDocument(type_tag=DocumentType.FAQ_PAGE, payload=payload)


def collect_review_claims(chunks: list[Chunk], limit: int = MAX_REVIEW_CLAIMS) -> list[Claim]:
    """First ``limit`` citation-ready claims in chunk order, then in-chunk order."""
    ready = (claim for chunk in chunks for claim in chunk.claims if claim.citation_ready)
    claims: list[Claim] = []
    for claim in ready:
        if len(claims) >= limit:
            break
        claims.append(claim)
    return claims


def build_claim_review_document(
    chunks: list[Chunk],
    citation: CitationMetadata,
    limit: int = MAX_REVIEW_CLAIMS,
) -> StructuredDocument | None:
    """Build a ClaimReview document from citation-ready claims.

    Args:
        chunks: Chunks in emission order.
        citation: The run's citation metadata.
        limit: Maximum number of claims to embed.

    Returns:
        A ClaimReview StructuredDocument, or None when no claim is ready.
    """
    claims = collect_review_claims(chunks, limit)
    if not claims:
        return None

    payload = {
        "@context": SCHEMA_CONTEXT,
        "@type": DocumentType.CLAIM_REVIEW.value,
        "url": citation.source_url,
        "author": {"@type": "Person", "name": citation.author},
        "datePublished": citation.publish_date,
        "claimReviewed": claims[0].text,
        "itemReviewed": [
            {
                "@type": "Claim",
                "text": claim.text,
                "keywords": claim.matched_patterns,
                "appearance": {"@type": "CreativeWork", "url": citation.source_url},
                "citation": {"@id": citation.id},
            }
            for claim in claims
        ],
        "citation": _citation_block(citation),
    }
    return StructuredDocument(type_tag=DocumentType.CLAIM_REVIEW, payload=payload)


def build_rag_metadata(
    page: ParsedPage,
    citation: CitationMetadata,
    chunk_count: int = 0,
) -> RagMetadata:
    """Summarize the page for retrieval consumers."""
    return RagMetadata(
        url=page.url,
        title=page.title,
        summary=page.summary,
        headings=page.headings,
        faq_questions=[pair.question for pair in page.faq_pairs],
        chunk_count=chunk_count,
        citation_id=citation.id,
    )
