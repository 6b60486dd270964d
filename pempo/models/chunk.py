"""Chunk, entity and claim data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, Enum):
    """Kinds of pattern-matched entities."""

    NUMBER = "NUMBER"
    ORGANIZATION = "ORGANIZATION"


class Entity(BaseModel):
    """A candidate entity matched in a text span."""

    model_config = ConfigDict(frozen=True)

    text: str
    type: EntityType
    confidence: float | None = None


class Claim(BaseModel):
    """A sentence flagged as a factual assertion."""

    model_config = ConfigDict(frozen=True)

    text: str
    type: str = "FactualClaim"
    citation_ready: bool = True
    matched_patterns: list[str] = Field(default_factory=list)


class Chunk(BaseModel):
    """A token-bounded, overlapping span of page text."""

    id: int
    text: str
    token_count: int = 0
    entities: list[Entity] = Field(default_factory=list)
    claims: list[Claim] = Field(default_factory=list)
    citation_ready: bool = True
