"""Run result data models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InjectionResults(BaseModel):
    """Counts of published and not-published documents."""

    success: int = 0
    failed: int = 0


class RunSummary(BaseModel):
    """Summary returned by the pipeline entry point.

    Dump with ``by_alias=True`` for the camelCase form consumed by
    automated checks.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    chunk_count: int = 0
    claim_count: int = 0
    faq_count: int = 0
    injection_results: InjectionResults = Field(default_factory=InjectionResults)


class RagMetadata(BaseModel):
    """Retrieval-oriented page overview exported alongside the JSON-LD."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    title: str
    summary: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    headings: list[str] = Field(default_factory=list)
    faq_questions: list[str] = Field(default_factory=list)
    chunk_count: int = 0
    citation_id: str = ""
