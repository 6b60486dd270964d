"""End-to-end tests for the run entry point."""

import json
import logging

import pytest

from pempo.config import AppConfig, InjectionConfig
from pempo.ingestion.parser import PageParser
from pempo.injection.manager import InjectionManager
from pempo.injection.registry import InMemoryRegistry
from pempo.injection.surface import HtmlDocumentSurface
from pempo.models.document import DocumentType
from pempo.models.parsed import ParsedPage
from pempo.pipeline import EmbedRunner, build_documents, run_embed

PAGE_HTML = """
<html>
<head>
  <title>Remote Work Report</title>
  <meta name="author" content="Jordan Lee">
  <meta property="article:published_time" content="2024-02-20T08:00:00Z">
</head>
<body>
  <h1>Remote Work Report</h1>
  <p>Remote work has changed how teams collaborate across time zones and offices.</p>
  <p>According to the annual survey, productivity increased by 12% over two years.</p>
  <h2>What did the survey measure?</h2>
  <p>The survey measured output, meeting load and reported satisfaction for each team.</p>
  <h2>Subscribe to our newsletter?</h2>
  <p>Get the latest reports delivered to your inbox every single week for free.</p>
  <p>Researchers found that asynchronous updates reduced meetings for most teams.</p>
</body>
</html>
"""


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(injection=InjectionConfig(verify_delay_seconds=0))


@pytest.fixture
def page() -> ParsedPage:
    return PageParser().parse_html(PAGE_HTML, url="https://example.com/remote-work")


@pytest.fixture
def surface() -> HtmlDocumentSurface:
    return HtmlDocumentSurface.from_html(PAGE_HTML)


class TestBuildDocuments:
    def test_builds_all_three_types(self, page: ParsedPage, config: AppConfig) -> None:
        chunks, documents = build_documents(page, config)
        assert len(chunks) == 1
        assert [d.type_tag for d in documents] == [
            DocumentType.ARTICLE,
            DocumentType.FAQ_PAGE,
            DocumentType.CLAIM_REVIEW,
        ]

    def test_article_uses_page_metadata(self, page: ParsedPage, config: AppConfig) -> None:
        _, documents = build_documents(page, config)
        article = documents[0].payload
        assert article["headline"] == "Remote Work Report"
        assert article["author"]["name"] == "Jordan Lee"
        assert article["datePublished"] == "2024-02-20T08:00:00Z"
        assert article["description"].startswith("Remote work has changed")

    def test_insufficient_content(self, config: AppConfig) -> None:
        page = ParsedPage(url="https://example.com", raw_text="too short")
        assert build_documents(page, config) == ([], [])


class TestRunEmbed:
    def test_summary(
        self, page: ParsedPage, surface: HtmlDocumentSurface, config: AppConfig
    ) -> None:
        summary = run_embed(page, surface, config=config)

        assert summary is not None
        assert summary.chunk_count == 1
        assert summary.claim_count == 2
        assert summary.faq_count == 1
        assert summary.injection_results.success == 3
        assert summary.injection_results.failed == 0

    def test_summary_alias_shape(
        self, page: ParsedPage, surface: HtmlDocumentSurface, config: AppConfig
    ) -> None:
        summary = run_embed(page, surface, config=config)
        assert summary.model_dump(by_alias=True) == {
            "chunkCount": 1,
            "claimCount": 2,
            "faqCount": 1,
            "injectionResults": {"success": 3, "failed": 0},
        }

    def test_documents_land_in_head(
        self, page: ParsedPage, surface: HtmlDocumentSurface, config: AppConfig
    ) -> None:
        run_embed(page, surface, config=config)
        for type_tag in DocumentType:
            placed = surface.query(type_tag)
            assert len(placed) == 1
            assert json.loads(placed[0])["@type"] == type_tag.value

    def test_second_run_skips_everything(
        self, page: ParsedPage, surface: HtmlDocumentSurface, config: AppConfig
    ) -> None:
        registry = InMemoryRegistry()
        run_embed(page, surface, registry=registry, config=config)
        second = run_embed(page, surface, registry=registry, config=config)

        assert second.injection_results.success == 0
        assert second.injection_results.failed == 3
        assert len(surface.published()) == 3

    def test_insufficient_content_returns_none(
        self, surface: HtmlDocumentSurface, config: AppConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        page = ParsedPage(url="https://example.com", raw_text="")
        with caplog.at_level(logging.WARNING):
            assert run_embed(page, surface, config=config) is None
        assert "Insufficient content" in caplog.text
        assert surface.published() == []

    def test_unexpected_surface_error_is_contained(
        self, page: ParsedPage, config: AppConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        class BrokenSurface:
            def attach(self, target, type_tag, serialized) -> None:
                raise RuntimeError("surface exploded")

            def published(self) -> list[str]:
                return []

            def query(self, type_tag) -> list[str]:
                return []

        with caplog.at_level(logging.ERROR):
            summary = run_embed(page, BrokenSurface(), config=config)

        assert summary.injection_results.success == 0
        assert summary.injection_results.failed == 3
        assert "Unexpected error publishing" in caplog.text

    def test_deferred_verification_finishes_before_return(
        self, page: ParsedPage, surface: HtmlDocumentSurface
    ) -> None:
        config = AppConfig(injection=InjectionConfig(verify_delay_seconds=0.05))
        manager = InjectionManager(surface, config=config.injection)

        summary = run_embed(page, surface, config=config, manager=manager)

        assert summary.injection_results.success == 3
        assert manager._timers == []


class TestEmbedRunner:
    def test_run(self, page: ParsedPage, surface: HtmlDocumentSurface, config: AppConfig) -> None:
        runner = EmbedRunner(surface, config=config)
        summary = runner.run(page)
        assert summary.injection_results.success == 3

    def test_repeat_run_is_deduplicated(
        self, page: ParsedPage, surface: HtmlDocumentSurface, config: AppConfig
    ) -> None:
        runner = EmbedRunner(surface, config=config)
        runner.run(page)
        second = runner.run(page)
        assert second.injection_results.failed == 3
        assert len(surface.query(DocumentType.ARTICLE)) == 1

    def test_reentrant_run_is_rejected(
        self, page: ParsedPage, surface: HtmlDocumentSurface, config: AppConfig
    ) -> None:
        runner = EmbedRunner(surface, config=config)
        runner._lock.acquire()
        try:
            assert runner.run(page) is None
        finally:
            runner._lock.release()
        assert surface.published() == []
