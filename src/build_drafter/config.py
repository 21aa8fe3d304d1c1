"""Configuration management."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = Path("config.yaml")

ANALYSIS_SYSTEM_PROMPT = (
    "You are an assistant that reads material about a student's project or "
    "activity and turns it into structured portfolio data."
)

ANALYSIS_USER_PROMPT = """\
Analyze the sources below and describe the project or activity they belong to.

Today is {today}.

Sources:
{sources}

Provide the following fields:
{fields}

Extract as much concrete information from the sources as possible.
Answer with a single JSON object only."""

COMBINE_SYSTEM_PROMPT = (
    "You are an expert at structuring project and activity information for "
    "student portfolios."
)

COMBINE_USER_PROMPT = """\
Below are two analyses of the same project or activity.

## First analysis
{first}

## Second analysis
{second}

Merge them into one complete and consistent record with these fields:
{fields}

Prefer the more specific and concrete information whenever the analyses \
differ, and integrate details that complement each other.
Never write "insufficient information" or similar; use what is available to \
produce a finished record.
Answer with a single JSON object only."""


@dataclass
class ClaudeConfig:
    """Claude API settings."""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1500
    temperature: float = 0.7
    timeout: float = 60.0


@dataclass
class ExtractionConfig:
    """Source extraction limits."""
    per_source_chars: int = 3000
    combined_chars: int = 8000
    fetch_timeout: float = 20.0
    user_agent: str = "build-drafter/0.1 (+portfolio draft generator)"
    max_sources: int = 3


@dataclass
class PathsConfig:
    """Path settings."""
    drafts_dir: Path = Path("drafts")


@dataclass
class PromptsConfig:
    """Prompts for the completion service."""
    analysis: dict = field(default_factory=lambda: {
        "system": ANALYSIS_SYSTEM_PROMPT,
        "user": ANALYSIS_USER_PROMPT,
    })
    combine: dict = field(default_factory=lambda: {
        "system": COMBINE_SYSTEM_PROMPT,
        "user": COMBINE_USER_PROMPT,
    })


@dataclass
class Settings:
    """Application settings."""

    # API key (from environment only)
    anthropic_api_key: str = ""

    # Config sections
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)

    @property
    def drafts_dir(self) -> Path:
        return self.paths.drafts_dir


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _apply_section(section: object, values: dict, name: str) -> None:
    """Copy YAML values onto a config section, rejecting unknown keys."""
    known = {f.name: f for f in fields(section)}
    for key, value in values.items():
        if key not in known:
            raise ValueError(f"Unknown setting '{name}.{key}' in config")
        if known[key].type is Path:
            value = Path(value)
        elif isinstance(getattr(section, key), dict):
            # Partial prompt overrides keep the other defaults
            value = {**getattr(section, key), **(value or {})}
        setattr(section, key, value)


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Get application settings from YAML config and environment."""
    if config_path is None:
        config_path = Path(os.getenv("BUILD_DRAFTER_CONFIG", str(DEFAULT_CONFIG_PATH)))

    config = load_config(config_path)

    settings = Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
    )

    sections = {
        "claude": settings.claude,
        "extraction": settings.extraction,
        "paths": settings.paths,
        "prompts": settings.prompts,
    }
    for name, values in config.items():
        if name not in sections:
            raise ValueError(f"Unknown config section '{name}'")
        _apply_section(sections[name], values or {}, name)

    return settings
