"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .fields import (
    DEFAULT_FIELDS,
    DEFAULT_IGNORE_FIELDS,
    FieldConfig,
    FieldSpec,
    apply_field_defaults,
    build_field_spec,
)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class DeviationSettings(BaseModel):
    """Rules deciding when a record's value counts as a deviation."""

    topic_missing_threshold: int = Field(
        1, ge=0, description="Missing norm topics needed before a record deviates"
    )
    topic_extra_threshold: int = Field(
        2, ge=0, description="Non-norm topics needed before a record deviates"
    )
    ignore_fields: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_FIELDS),
        description="Fields never classified as deviating (norms are still computed)",
    )

    model_config = {"frozen": True}

    @field_validator("ignore_fields")
    @classmethod
    def normalize_ignore_fields(cls, v: List[str]) -> List[str]:
        """Strip whitespace, drop blanks and duplicates while keeping order."""
        seen = []
        for name in v:
            stripped = name.strip()
            if stripped and stripped not in seen:
                seen.append(stripped)
        return seen

    def is_ignored(self, field_name: str) -> bool:
        return field_name in self.ignore_fields


class ReportSettings(BaseModel):
    """Settings for norm presentation and report generation."""

    max_topics_in_norms: int = Field(
        10, ge=0, description="Number of most common topics kept in the topics norm"
    )
    include_archived: bool = Field(
        False, description="Whether archived repositories take part in the analysis"
    )
    generate_both_reports: bool = Field(
        True, description="Also write a deviations-only report next to the full one"
    )
    custom_css: Optional[str] = Field(None, description="Extra CSS injected into reports")
    output_dir: str = Field("reports", min_length=1, description="Directory for reports")

    model_config = {"frozen": True}


class GitHubSettings(BaseModel):
    """GitHub API acquisition settings."""

    api_url: str = Field("https://api.github.com", min_length=1, description="API base URL")
    repos_per_page: int = Field(100, ge=1, le=100, description="Page size for repo listing")
    include_private: bool = Field(True, description="Include private repositories")
    include_public: bool = Field(True, description="Include public repositories")
    include_internal: bool = Field(True, description="Include internal repositories")
    timeout: int = Field(30, ge=5, le=300, description="HTTP request timeout (seconds)")
    page_delay_seconds: float = Field(0.1, ge=0, description="Pause between listing pages")
    protection_delay_seconds: float = Field(
        0.2, ge=0, description="Pause between branch protection lookups"
    )
    fetch_branch_protection: bool = Field(
        True, description="Look up default-branch protection for every repository"
    )
    user_agent: str = Field("repo-norms/1.0", min_length=1, description="User-Agent header")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the API base URL."""
        return v.strip().rstrip("/")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the repository norms analyzer."""

    fields: List[FieldSpec] = Field(
        default_factory=lambda: [build_field_spec(name) for name in DEFAULT_FIELDS],
        min_length=1,
        description="Ordered list of fields to analyze",
    )
    deviation_settings: DeviationSettings = Field(default_factory=DeviationSettings)
    report_settings: ReportSettings = Field(default_factory=ReportSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("fields", mode="before")
    @classmethod
    def resolve_field_entries(cls, v):
        """Resolve bare identifiers and partial mappings through the kind table."""
        if not isinstance(v, list):
            return v
        return [apply_field_defaults(entry) for entry in v]

    @model_validator(mode="after")
    def validate_unique_fields(self):
        """Reject fields listed more than once."""
        names = [spec.name for spec in self.fields]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Fields listed more than once: {', '.join(duplicates)}")
        return self

    @property
    def field_config(self) -> FieldConfig:
        return FieldConfig(self.fields)
