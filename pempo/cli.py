"""Command line for embedding citable structured data into a rendered HTML page."""

import argparse
import json
import logging
from pathlib import Path

from pempo.citation import build_citation
from pempo.config import load_config
from pempo.ingestion.parser import PageParser, load_soup
from pempo.injection.surface import HtmlDocumentSurface
from pempo.pipeline import EmbedRunner
from pempo.schema.builder import build_rag_metadata

EMPTY_PAGE = "<html><head></head><body></body></html>"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse; ``sys.argv[1:]`` when None.

    Returns:
        The parsed namespace.
    """
    parser = argparse.ArgumentParser(description="Inject citable JSON-LD into an HTML page.")
    parser.add_argument("page", type=Path, help="HTML or text file to process")
    parser.add_argument("--url", default=None, help="source URL of the page")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"))
    parser.add_argument("--output", type=Path, default=None, help="write the modified page here")
    parser.add_argument("--rag-output", type=Path, default=None, help="write RAG metadata JSON here")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Parse the page, publish its documents and print the run summary."""
    args = parse_args(argv)
    config = load_config(args.config)
    logging.basicConfig(
        level=config.app.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = PageParser(faq_config=config.faq)
    page = parser.parse(args.page, url=args.url)

    html = parser.read_text(args.page) if args.page.suffix.lower() in (".html", ".htm") else EMPTY_PAGE
    surface = HtmlDocumentSurface(load_soup(html))

    runner = EmbedRunner(surface, config=config)
    summary = runner.run(page)

    if summary is None:
        print(json.dumps({"error": "insufficient content"}))
        return 1

    if args.output:
        args.output.write_text(surface.render(), encoding="utf-8")

    if args.rag_output:
        citation = build_citation(page.metadata, span_text=page.raw_text)
        rag = build_rag_metadata(page, citation, chunk_count=summary.chunk_count)
        args.rag_output.write_text(rag.model_dump_json(by_alias=True, indent=2), encoding="utf-8")

    print(summary.model_dump_json(by_alias=True, indent=2))
    return 0
