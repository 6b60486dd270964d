"""Page ingestion: parsing, FAQ pairing and chunking."""

from pempo.ingestion.chunker import CitationChunker, create_chunks
from pempo.ingestion.faq import extract_faq_pairs
from pempo.ingestion.parser import PageParser

__all__ = ["CitationChunker", "PageParser", "create_chunks", "extract_faq_pairs"]
