"""Run entry point: chunk, build and publish structured documents."""

import logging
import threading

from pempo.citation import build_citation
from pempo.config import AppConfig
from pempo.ingestion.chunker import CitationChunker
from pempo.injection.manager import InjectionManager
from pempo.injection.registry import DocumentRegistry
from pempo.injection.surface import DocumentSurface
from pempo.models.chunk import Chunk
from pempo.models.document import StructuredDocument
from pempo.models.parsed import ParsedPage
from pempo.models.result import InjectionResults, RunSummary
from pempo.schema.builder import (
    build_article_document,
    build_claim_review_document,
    build_faq_document,
)

logger = logging.getLogger(__name__)


def build_documents(
    page: ParsedPage, config: AppConfig | None = None
) -> tuple[list[Chunk], list[StructuredDocument]]:
    """Chunk the page and build every applicable structured document.

    Args:
        page: The parsed page.
        config: Application configuration.

    Returns:
        A ``(chunks, documents)`` tuple. Both are empty when the page text
        is too short to chunk.
    """
    config = config or AppConfig()
    chunker = CitationChunker(config=config.chunking, extraction=config.extraction)
    chunks = chunker.chunk(page.raw_text)
    if not chunks:
        return [], []

    citation = build_citation(page.metadata, span_text=page.raw_text)
    documents = [build_article_document(chunks, citation, description=page.summary)]

    faq = build_faq_document(page.faq_pairs, author=citation.author)
    if faq is not None:
        documents.append(faq)

    review = build_claim_review_document(
        chunks, citation, limit=config.extraction.max_review_claims
    )
    if review is not None:
        documents.append(review)

    return chunks, documents


def run_embed(
    page: ParsedPage,
    surface: DocumentSurface,
    registry: DocumentRegistry | None = None,
    config: AppConfig | None = None,
    manager: InjectionManager | None = None,
) -> RunSummary | None:
    """Process one page and publish its structured documents.

    Per-document failures are logged and counted; nothing raises out of
    this function during publishing. Deferred verifications have finished
    by the time it returns.

    Args:
        page: The parsed page.
        surface: Where documents are attached.
        registry: Published-type registry shared across runs on this page.
        config: Application configuration.
        manager: Pre-built manager; one is created from the other
            arguments when omitted.

    Returns:
        RunSummary, or None when the page text is too short to process.
    """
    config = config or AppConfig()

    chunks, documents = build_documents(page, config)
    if not chunks:
        logger.warning("Insufficient content on %s; nothing published", page.url or "page")
        return None

    manager = manager or InjectionManager(surface, registry=registry, config=config.injection)
    results = InjectionResults()

    for document in documents:
        try:
            published = manager.publish(document)
        except Exception:
            logger.exception("Unexpected error publishing %s", document.type_tag.value)
            published = False

        if published:
            results.success += 1
        else:
            results.failed += 1

    manager.wait_for_verification()

    summary = RunSummary(
        chunk_count=len(chunks),
        claim_count=sum(len(chunk.claims) for chunk in chunks),
        faq_count=len(page.faq_pairs),
        injection_results=results,
    )
    logger.info(
        "Run complete: %d chunks, %d claims, %d FAQ pairs, %d published, %d not published",
        summary.chunk_count,
        summary.claim_count,
        summary.faq_count,
        results.success,
        results.failed,
    )
    return summary


class EmbedRunner:
    """Single-run guard around ``run_embed`` for one surface.

    A call made while another run is still in progress is logged and
    returns None instead of racing the duplicate check.

    Args:
        surface: Where documents are attached.
        registry: Published-type registry for the surface.
        config: Application configuration.
    """

    def __init__(
        self,
        surface: DocumentSurface,
        registry: DocumentRegistry | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._manager = InjectionManager(surface, registry=registry, config=self._config.injection)
        self._surface = surface
        self._lock = threading.Lock()

    @property
    def manager(self) -> InjectionManager:
        """The manager shared by every run on this surface."""
        return self._manager

    def run(self, page: ParsedPage) -> RunSummary | None:
        """Process ``page`` unless another run is in progress.

        Args:
            page: The parsed page.

        Returns:
            RunSummary, or None when a run is already active or the page
            text is too short to process.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("A run is already in progress; ignoring re-entrant call")
            return None
        try:
            return run_embed(page, self._surface, config=self._config, manager=self._manager)
        finally:
            self._lock.release()
