"""Scanner settings using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Scanner settings loaded from ARCHSCAN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ARCHSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Metadata source
    source_roots: list[str] = Field(
        default_factory=lambda: ["."],
        description="Directories whose .py files are scanned for markers",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: ["tests/*", "*/tests/*", "test_*.py", "*/test_*.py"],
        description="Glob patterns (relative to a source root) of files to skip",
    )

    # Component discovery
    package_to_scan: str | None = Field(
        default=None,
        description="Only types in this dotted package become components. Empty = all.",
    )
    include_structural: bool = Field(
        default=True,
        description="Add undescribed component edges from declared field types before resolving markers",
    )

    # Mermaid C4 export
    c4_max_elements: int = Field(
        default=120,
        description="Maximum elements rendered in one C4 diagram (0 = unlimited)",
    )


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
