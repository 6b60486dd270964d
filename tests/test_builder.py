"""Tests for the structured-document builders."""

import json
from datetime import datetime, timezone

import pytest

from pempo.citation import build_citation
from pempo.models import (
    Chunk,
    CitationMetadata,
    Claim,
    DocumentType,
    Entity,
    EntityType,
    FaqPair,
    PageMetadata,
    ParsedPage,
)
from pempo.schema.builder import (
    build_article_document,
    build_claim_review_document,
    build_faq_document,
    build_rag_metadata,
    citation_readiness,
    collect_review_claims,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def citation() -> CitationMetadata:
    metadata = PageMetadata(
        url="https://example.com/page",
        title="Example Page",
        meta_author="Jordan Lee",
        published_time="2024-01-10",
    )
    return build_citation(metadata, now=NOW)


def _claim(text: str, ready: bool = True) -> Claim:
    return Claim(text=text, citation_ready=ready, matched_patterns=["found_that"])


def _chunk(chunk_id: int, claims: list[Claim] | None = None, ready: bool = True) -> Chunk:
    return Chunk(
        id=chunk_id,
        text=f"chunk {chunk_id} text",
        token_count=5,
        entities=[Entity(text="Acme Corp", type=EntityType.ORGANIZATION)],
        claims=claims or [],
        citation_ready=ready,
    )


class TestCitationReadiness:
    def test_zero_chunks(self) -> None:
        assert citation_readiness([]) == 0

    def test_all_ready(self) -> None:
        assert citation_readiness([_chunk(0), _chunk(1)]) == 100

    def test_partial(self) -> None:
        chunks = [_chunk(0), _chunk(1, ready=False), _chunk(2, ready=False)]
        assert citation_readiness(chunks) == 33

    def test_range(self) -> None:
        chunks = [_chunk(i, ready=i % 2 == 0) for i in range(7)]
        assert 0 <= citation_readiness(chunks) <= 100


class TestArticleDocument:
    def test_always_produced(self, citation: CitationMetadata) -> None:
        document = build_article_document([], citation, now=NOW)
        assert document.type_tag is DocumentType.ARTICLE
        assert document.payload["hasPart"] == []
        assert document.payload["citationReadiness"] == 0

    def test_embeds_chunks(self, citation: CitationMetadata) -> None:
        chunks = [_chunk(0), _chunk(1)]
        document = build_article_document(chunks, citation, description="Summary", now=NOW)
        payload = document.payload

        assert payload["@context"] == "https://schema.org"
        assert payload["@type"] == "Article"
        assert payload["headline"] == "Example Page"
        assert payload["author"]["name"] == "Jordan Lee"
        assert payload["description"] == "Summary"
        assert payload["dateModified"] == NOW.isoformat()
        assert payload["mainEntityOfPage"] == "https://example.com/page"
        assert payload["citationReadiness"] == 100

        parts = payload["hasPart"]
        assert [p["position"] for p in parts] == [0, 1]
        assert parts[0]["text"] == "chunk 0 text"
        assert parts[0]["tokenCount"] == 5
        assert parts[0]["mentions"] == ["Acme Corp"]
        assert parts[0]["citation"] == {"@id": citation.id}

    def test_single_citation_block(self, citation: CitationMetadata) -> None:
        payload = build_article_document([_chunk(0)], citation, now=NOW).payload
        assert payload["citation"]["apa"] == citation.formats.apa
        assert payload["citation"]["mla"] == citation.formats.mla
        assert payload["citation"]["chicago"] == citation.formats.chicago

    def test_citation_block_carries_excerpt(self) -> None:
        metadata = PageMetadata(url="https://example.com/page", title="Example Page")
        citation = build_citation(metadata, span_text="  Opening words of the page.", now=NOW)

        payload = build_article_document([_chunk(0)], citation, now=NOW).payload

        assert payload["citation"]["excerpt"] == "Opening words of the page."

    def test_serializes_to_json(self, citation: CitationMetadata) -> None:
        document = build_article_document([_chunk(0)], citation, now=NOW)
        assert json.loads(document.serialize())["@type"] == "Article"


class TestFaqDocument:
    def test_none_without_pairs(self) -> None:
        assert build_faq_document([]) is None

    def test_items_carry_extraction_timestamp(self) -> None:
        extracted = datetime(2024, 6, 2, 8, 0, tzinfo=timezone.utc)
        pair = FaqPair(question="What is it?", answer="A long enough answer text.", extracted_at=extracted)

        document = build_faq_document([pair], author="Jordan Lee")

        assert document is not None
        assert document.type_tag is DocumentType.FAQ_PAGE
        question = document.payload["mainEntity"][0]
        assert question["@type"] == "Question"
        assert question["name"] == "What is it?"
        answer = question["acceptedAnswer"]
        assert answer["text"] == "A long enough answer text."
        assert answer["citation"] == {
            "author": "Jordan Lee",
            "dateCreated": extracted.isoformat(),
        }

    def test_default_author_sentinel(self) -> None:
        pair = FaqPair(question="Why?", answer="Because of several good reasons.")
        document = build_faq_document([pair])
        answer = document.payload["mainEntity"][0]["acceptedAnswer"]
        assert answer["citation"]["author"] == "Unknown Author"


class TestClaimReviewDocument:
    def test_none_without_claims(self, citation: CitationMetadata) -> None:
        assert build_claim_review_document([_chunk(0)], citation) is None

    def test_none_when_no_claim_ready(self, citation: CitationMetadata) -> None:
        chunks = [_chunk(0, claims=[_claim("not ready yet", ready=False)])]
        assert build_claim_review_document(chunks, citation) is None

    def test_caps_at_five_in_chunk_order(self, citation: CitationMetadata) -> None:
        chunks = [
            _chunk(0, claims=[_claim("a1"), _claim("a2")]),
            _chunk(1, claims=[_claim("b1"), _claim("b2"), _claim("b3")]),
            _chunk(2, claims=[_claim("c1")]),
        ]
        document = build_claim_review_document(chunks, citation)

        assert document is not None
        assert document.type_tag is DocumentType.CLAIM_REVIEW
        items = document.payload["itemReviewed"]
        assert [item["text"] for item in items] == ["a1", "a2", "b1", "b2", "b3"]
        assert document.payload["claimReviewed"] == "a1"
        assert all(item["citation"] == {"@id": citation.id} for item in items)
        assert all(item["keywords"] == ["found_that"] for item in items)

    def test_collect_respects_limit(self) -> None:
        chunks = [_chunk(0, claims=[_claim(f"c{i}") for i in range(4)])]
        assert [c.text for c in collect_review_claims(chunks, limit=2)] == ["c0", "c1"]


class TestRagMetadata:
    def test_summary_fields(self, citation: CitationMetadata) -> None:
        page = ParsedPage(
            url="https://example.com/page",
            title="Example Page",
            summary="Short summary",
            headings=["What is it?", "Background"],
            faq_pairs=[FaqPair(question="What is it?", answer="An example answer that is long.")],
        )
        rag = build_rag_metadata(page, citation, chunk_count=3)
        dumped = rag.model_dump(by_alias=True)
        assert dumped["faqQuestions"] == ["What is it?"]
        assert dumped["chunkCount"] == 3
        assert dumped["citationId"] == citation.id
        assert dumped["headings"] == ["What is it?", "Background"]
