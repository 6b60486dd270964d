"""Publishing structured documents to a page."""

from pempo.injection.manager import InjectionManager
from pempo.injection.registry import DocumentRegistry, InMemoryRegistry
from pempo.injection.surface import DocumentSurface, HtmlDocumentSurface, PlacementError

__all__ = [
    "DocumentRegistry",
    "DocumentSurface",
    "HtmlDocumentSurface",
    "InMemoryRegistry",
    "InjectionManager",
    "PlacementError",
]
