"""Configuration loader for the PEMPO embed pipeline."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "PEMPO Embed"
    version: str = "1.0.0"
    log_level: str = "INFO"


class ChunkingConfig(BaseModel):
    """Text chunking configuration."""

    target_tokens: int = 384
    overlap_tokens: int = 50
    min_content_chars: int = 100
    min_paragraph_chars: int = 50


class ExtractionConfig(BaseModel):
    """Claim extraction and review limits."""

    min_claim_chars: int = 20
    max_review_claims: int = 5


class FaqConfig(BaseModel):
    """Heading/answer pairing configuration."""

    heading_tags: list[str] = Field(default_factory=lambda: ["h2", "h3"])
    max_siblings: int = 3
    min_answer_chars: int = 30


class InjectionConfig(BaseModel):
    """Structured-document placement configuration."""

    targets: list[str] = Field(default_factory=lambda: ["head", "body", "document"])
    verify_delay_seconds: float = 0.1


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    faq: FaqConfig = Field(default_factory=FaqConfig)
    injection: InjectionConfig = Field(default_factory=InjectionConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment overrides
    log_level = os.getenv("PEMPO_LOG_LEVEL")
    if log_level:
        config.app.log_level = log_level.upper()

    verify_delay = os.getenv("PEMPO_VERIFY_DELAY")
    if verify_delay:
        config.injection.verify_delay_seconds = float(verify_delay)

    return config
