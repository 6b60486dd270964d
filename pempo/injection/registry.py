"""Registry of document types already published to a surface."""

from typing import Protocol

from pempo.models.document import DocumentType


class DocumentRegistry(Protocol):
    """Set-like store keyed by document type tag."""

    def contains(self, type_tag: DocumentType) -> bool: ...

    def add(self, type_tag: DocumentType) -> None: ...


class InMemoryRegistry:
    """DocumentRegistry backed by a set; lives for one page."""

    def __init__(self) -> None:
        self._tags: set[DocumentType] = set()

    def contains(self, type_tag: DocumentType) -> bool:
        return DocumentType(type_tag) in self._tags

    def add(self, type_tag: DocumentType) -> None:
        self._tags.add(DocumentType(type_tag))

    def __len__(self) -> int:
        return len(self._tags)
