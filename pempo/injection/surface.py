"""Document surfaces that structured documents are attached to."""

from typing import Protocol

from bs4 import BeautifulSoup, Tag

from pempo.ingestion.parser import load_soup
from pempo.models.document import DocumentType

JSON_LD_TYPE = "application/ld+json"
TYPE_ATTRIBUTE = "data-schema-type"


class PlacementError(Exception):
    """Raised when a surface cannot accept a document at a target."""


class DocumentSurface(Protocol):
    """Where serialized documents are attached and looked up."""

    def attach(self, target: str, type_tag: DocumentType, serialized: str) -> None: ...

    def published(self) -> list[str]: ...

    def query(self, type_tag: DocumentType) -> list[str]: ...


class HtmlDocumentSurface:
    """Attaches JSON-LD ``<script>`` blocks to a parsed HTML page.

    Targets are ``head``, ``body`` and ``document`` (the root element, or
    the parse tree itself when the page has no ``<html>``).

    Args:
        soup: The page to modify in place.
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def from_html(cls, html: str) -> "HtmlDocumentSurface":
        """Parse ``html`` with lxml and wrap the result.

        Args:
            html: Page markup.

        Returns:
            A surface over the parsed page.
        """
        return cls(load_soup(html))

    def attach(self, target: str, type_tag: DocumentType, serialized: str) -> None:
        """Append a JSON-LD script to the target element.

        Args:
            target: One of ``head``, ``body`` or ``document``.
            type_tag: Document type, recorded on the script for lookups.
            serialized: JSON-LD text.

        Raises:
            PlacementError: If the target is unknown or absent from the page.
        """
        container = self._resolve(target)
        if container is None:
            raise PlacementError(f"Target '{target}' is not present in the page")

        script = self._soup.new_tag(
            "script",
            attrs={"type": JSON_LD_TYPE, TYPE_ATTRIBUTE: DocumentType(type_tag).value},
        )
        script.string = serialized
        container.append(script)

    def published(self) -> list[str]:
        """Raw text of every JSON-LD block on the page."""
        return [
            script.string or ""
            for script in self._soup.find_all("script", attrs={"type": JSON_LD_TYPE})
        ]

    def query(self, type_tag: DocumentType) -> list[str]:
        """Raw text of the JSON-LD blocks attached for ``type_tag``."""
        attrs = {"type": JSON_LD_TYPE, TYPE_ATTRIBUTE: DocumentType(type_tag).value}
        return [script.string or "" for script in self._soup.find_all("script", attrs=attrs)]

    def render(self) -> str:
        """Serialize the page, including every attached document."""
        return str(self._soup)

    def _resolve(self, target: str) -> Tag | None:
        """Map a target name to its element.

        Args:
            target: One of ``head``, ``body`` or ``document``.

        Returns:
            The element, or None when the page lacks it.

        Raises:
            PlacementError: If the target name is unknown.
        """
        if target == "head":
            return self._soup.head
        if target == "body":
            return self._soup.body
        if target == "document":
            return self._soup.html or self._soup
        raise PlacementError(f"Unknown placement target '{target}'")
