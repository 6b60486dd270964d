"""Paragraph-accumulating chunker with sentence overlap."""

import logging
import re

from pempo.config import ChunkingConfig, ExtractionConfig
from pempo.extraction.claims import extract_claims
from pempo.extraction.entities import extract_entities
from pempo.extraction.tokens import estimate_tokens
from pempo.models.chunk import Chunk

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

# Sentences keep their terminal punctuation so the overlap is a verbatim
# copy of the tail of the closed chunk. They are matched per paragraph and
# never span a paragraph break.
SENTENCE = re.compile(r"[^.!?]+[.!?]*")

OVERLAP_SENTENCES = 2


class CitationChunker:
    """Splits page text into overlapping, token-bounded chunks.

    Chunking strategy:
    1. Split on blank lines and drop paragraphs shorter than
       ``min_paragraph_chars``.
    2. Accumulate paragraphs into a buffer until adding the next one would
       push the estimate strictly above ``target_tokens``.
    3. Close the buffer as a chunk and seed the next buffer with the last
       two sentences of the closed one, followed by a paragraph break.
       A paragraph without terminal punctuation counts as one sentence.

    ``overlap_tokens`` is accepted for configuration parity but the overlap
    is always sentence-granular.

    Args:
        config: ChunkingConfig with target_tokens, overlap_tokens,
                min_content_chars and min_paragraph_chars settings.
        extraction: ExtractionConfig used for claim detection.
    """

    def __init__(
        self,
        config: ChunkingConfig,
        extraction: ExtractionConfig | None = None,
    ) -> None:
        self._config = config
        self._extraction = extraction or ExtractionConfig()

    def chunk(self, content: str | None) -> list[Chunk]:
        """Split content into chunks.

        Args:
            content: Page text with paragraphs separated by blank lines.

        Returns:
            Chunks with dense ids starting at 0, or an empty list when the
            content is absent or shorter than ``min_content_chars``.
        """
        if not content or len(content) < self._config.min_content_chars:
            logger.info(
                "Content too short to chunk (%d chars)", len(content or "")
            )
            return []

        paragraphs = self._split_paragraphs(content)
        target = self._config.target_tokens

        chunks: list[Chunk] = []
        buffer = ""

        for para in paragraphs:
            candidate = f"{buffer}\n\n{para}" if buffer else para

            if buffer and estimate_tokens(candidate) > target:
                chunks.append(self._close_chunk(buffer, chunk_id=len(chunks)))
                overlap = self._overlap_from(buffer)
                buffer = f"{overlap}\n\n{para}" if overlap else para
            else:
                buffer = candidate

        if buffer.strip():
            chunks.append(self._close_chunk(buffer, chunk_id=len(chunks)))

        logger.debug("Created %d chunks from %d paragraphs", len(chunks), len(paragraphs))
        return chunks

    def _split_paragraphs(self, content: str) -> list[str]:
        """Split on blank lines and keep paragraphs of sufficient length.

        Args:
            content: The text to split.

        Returns:
            Trimmed paragraphs in document order.
        """
        minimum = self._config.min_paragraph_chars
        return [
            para.strip()
            for para in PARAGRAPH_BREAK.split(content)
            if len(para.strip()) >= minimum
        ]

    def _close_chunk(self, text: str, chunk_id: int) -> Chunk:
        """Build a chunk from a closed buffer, running both extractors.

        Args:
            text: The buffer contents.
            chunk_id: Position of the chunk in emission order.

        Returns:
            A citation-ready Chunk.
        """
        return Chunk(
            id=chunk_id,
            text=text,
            token_count=estimate_tokens(text),
            entities=extract_entities(text),
            claims=extract_claims(text, min_chars=self._extraction.min_claim_chars),
            citation_ready=True,
        )

    def _overlap_from(self, text: str) -> str:
        """Return the trailing sentences of a closed chunk.

        Args:
            text: The closed chunk's text.

        Returns:
            Up to ``OVERLAP_SENTENCES`` trailing sentences. Sentences from the
            same paragraph are joined by a space; sentences from different
            paragraphs keep the paragraph break between them.
        """
        sentences: list[tuple[int, str]] = []
        for index, para in enumerate(PARAGRAPH_BREAK.split(text)):
            sentences.extend((index, s.strip()) for s in SENTENCE.findall(para) if s.strip())

        overlap = ""
        previous = None
        for index, sentence in sentences[-OVERLAP_SENTENCES:]:
            if previous is not None:
                overlap += " " if index == previous else "\n\n"
            overlap += sentence
            previous = index
        return overlap


def create_chunks(
    content: str | None,
    target_tokens: int = 384,
    overlap_tokens: int = 50,
) -> list[Chunk]:
    """Chunk ``content`` with default length thresholds.

    Args:
        content: Page text with paragraphs separated by blank lines.
        target_tokens: Estimated token budget per chunk.
        overlap_tokens: Accepted for parity; overlap is sentence-based.

    Returns:
        Ordered list of Chunk objects.
    """
    config = ChunkingConfig(target_tokens=target_tokens, overlap_tokens=overlap_tokens)
    return CitationChunker(config=config).chunk(content)
