"""Page parser: reads rendered HTML (or plain text) into a ParsedPage."""

import json
import logging
from pathlib import Path
from typing import Any

import chardet
from bs4 import BeautifulSoup, Tag

from pempo.config import FaqConfig
from pempo.ingestion.faq import extract_faq_pairs
from pempo.models.parsed import PageMetadata, ParsedPage

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".html": "html",
    ".htm": "html",
    ".txt": "txt",
    ".md": "txt",
}

SUMMARY_PARAGRAPHS = 3
SUMMARY_MAX_CHARS = 500

BYLINE_SELECTORS = ["[rel=author]", ".byline", ".author"]


def load_soup(html: str) -> BeautifulSoup:
    """Parse HTML with the lxml backend."""
    return BeautifulSoup(html, "lxml")


class PageParser:
    """Parses page files into a ParsedPage representation.

    HTML pages yield body text, page metadata and FAQ candidates. Plain
    text files yield body text only.

    Args:
        faq_config: Limits for heading/answer pairing.
    """

    def __init__(self, faq_config: FaqConfig | None = None) -> None:
        self._faq_config = faq_config or FaqConfig()

    def parse(self, file_path: str | Path, url: str | None = None) -> ParsedPage:
        """Parse a page file into a ParsedPage structure.

        Args:
            file_path: Path to the page file.
            url: Source URL of the page; falls back to the canonical link
                or a ``file://`` URL.

        Returns:
            A ParsedPage containing body text and metadata.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file format is not supported.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        file_format = self._detect_format(path)
        raw = self.read_text(path)

        if file_format == "html":
            page = self.parse_html(raw, url=url or "")
            if not page.url:
                page.url = page.metadata.url = path.resolve().as_uri()
        else:
            page = ParsedPage(
                url=url or path.resolve().as_uri(),
                title=path.stem,
                raw_text=raw,
                metadata=PageMetadata(url=url or path.resolve().as_uri(), title=path.stem),
            )

        page.source_path = str(path)
        return page

    def parse_html(self, html: str, url: str = "") -> ParsedPage:
        """Parse an HTML string into a ParsedPage.

        Args:
            html: The rendered page markup.
            url: Source URL of the page.

        Returns:
            A ParsedPage with text, summary, headings, metadata and FAQ pairs.
        """
        soup = load_soup(html)
        # FAQ pairs and JSON-LD must be read before scripts are stripped.
        metadata = self._extract_metadata(soup, url)
        faq_pairs = extract_faq_pairs(soup, self._faq_config)

        for tag in soup(["script", "style", "noscript"]):
            tag.decompose()

        paragraphs = self._paragraph_texts(soup)

        return ParsedPage(
            url=metadata.url,
            title=metadata.title,
            raw_text="\n\n".join(paragraphs),
            summary=" ".join(paragraphs[:SUMMARY_PARAGRAPHS])[:SUMMARY_MAX_CHARS],
            headings=[h.get_text(" ", strip=True) for h in soup.find_all(["h2", "h3"])],
            metadata=metadata,
            faq_pairs=faq_pairs,
        )

    def _detect_format(self, file_path: Path) -> str:
        """Determine file format from extension.

        Args:
            file_path: Path to the file.

        Returns:
            Format string ("html" or "txt").

        Raises:
            ValueError: If extension is not supported.
        """
        ext = file_path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported file format: '{ext}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS.keys())}"
            )
        return SUPPORTED_FORMATS[ext]

    def read_text(self, file_path: Path) -> str:
        """Read a file with encoding detection.

        Tries UTF-8 first, then uses chardet for fallback detection.

        Args:
            file_path: Path to the file.

        Returns:
            The file content as a string.
        """
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            pass

        raw_bytes = file_path.read_bytes()
        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence", 0)

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                file_path,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.error("Failed to decode file: %s", file_path)
            return raw_bytes.decode("utf-8", errors="replace")

    def _paragraph_texts(self, soup: BeautifulSoup) -> list[str]:
        # Container selection is left to callers; every body paragraph counts.
        root = soup.body or soup
        texts = (p.get_text(" ", strip=True) for p in root.find_all("p"))
        return [text for text in texts if text]

    def _extract_metadata(self, soup: BeautifulSoup, url: str) -> PageMetadata:
        """Collect every citation-relevant metadata source on the page.

        Args:
            soup: The parsed page.
            url: Caller-supplied URL, preferred over the canonical link.

        Returns:
            PageMetadata with one field per source.
        """
        canonical = soup.find("link", rel="canonical")
        if not url and isinstance(canonical, Tag):
            url = str(canonical.get("href") or "")

        title = soup.title.get_text(strip=True) if soup.title else ""

        time_tag = soup.find("time")
        time_value = None
        if isinstance(time_tag, Tag):
            time_value = str(time_tag.get("datetime") or time_tag.get_text(strip=True)) or None

        return PageMetadata(
            url=url,
            title=title,
            meta_author=self._meta_content(soup, name="author"),
            structured_author=self._structured_author(soup),
            byline=self._byline(soup),
            published_time=self._meta_content(soup, property="article:published_time"),
            meta_date=self._meta_content(soup, name="date"),
            time_element=time_value,
            modified_time=self._meta_content(soup, property="article:modified_time"),
        )

    def _meta_content(self, soup: BeautifulSoup, **attrs: str) -> str | None:
        tag = soup.find("meta", attrs=attrs)
        if isinstance(tag, Tag):
            content = str(tag.get("content") or "").strip()
            return content or None
        return None

    def _byline(self, soup: BeautifulSoup) -> str | None:
        for selector in BYLINE_SELECTORS:
            tag = soup.select_one(selector)
            if tag is not None:
                text = tag.get_text(" ", strip=True)
                if text:
                    return text
        return None

    def _structured_author(self, soup: BeautifulSoup) -> str | None:
        """Read the first author name from the page's JSON-LD blocks.

        Args:
            soup: The parsed page.

        Returns:
            Author name, or None when no block declares one.
        """
        for script in soup.find_all("script", type="application/ld+json"):
            try:
                data = json.loads(script.string or "")
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed JSON-LD block while reading author")
                continue

            items = data if isinstance(data, list) else [data]
            for item in items:
                if isinstance(item, dict):
                    name = _author_name(item.get("author"))
                    if name:
                        return name
        return None


def _author_name(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        return _author_name(value.get("name"))
    if isinstance(value, list):
        for entry in value:
            name = _author_name(entry)
            if name:
                return name
    return None
