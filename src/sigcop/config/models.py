"""
Configuration models for SigCop.

Keys follow RuboCop's configuration file layout (``AllCops``,
``Sorbet/<CopName>`` with ``Enabled`` / ``LineLengthLimit``) so existing
``.rubocop.yml`` sections can be reused as-is.
"""

from pydantic import BaseModel, ConfigDict, Field


class CopConfig(BaseModel):
    """Settings for a single cop."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    enabled: bool = Field(default=True, alias="Enabled", description="Run this cop")
    line_length_limit: int | None = Field(
        default=None,
        alias="LineLengthLimit",
        ge=1,
        description="Maximum line length for synthesized signatures (unbounded when unset)",
    )


class AllCopsConfig(BaseModel):
    """Settings shared by every cop."""

    model_config = ConfigDict(populate_by_name=True)

    include: list[str] = Field(
        default_factory=lambda: ["*.rb"],
        alias="Include",
        description="Glob patterns of files to inspect when walking directories",
    )
    exclude: list[str] = Field(
        default_factory=lambda: ["vendor/*", ".git/*", "node_modules/*", "tmp/*"],
        alias="Exclude",
        description="Glob patterns of files to skip",
    )


class SigCopConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(populate_by_name=True)

    all_cops: AllCopsConfig = Field(default_factory=AllCopsConfig, alias="AllCops")
    cops: dict[str, CopConfig] = Field(default_factory=dict)

    def for_cop(self, name: str) -> CopConfig:
        return self.cops.get(name) or CopConfig()

    def is_enabled(self, name: str) -> bool:
        return self.for_cop(name).enabled
