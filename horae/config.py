"""Configuration management for the transformation pipeline."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class TransformConfig(BaseModel):
    """Options recognized by the markup transformation engine."""

    lang1: str = "Latin"
    lang2: Optional[str] = "English"
    reference_language: Optional[str] = Field(
        default=None,
        description="Language name or display code whose column drives sentence splitting",
    )
    no_split: bool = Field(default=False, description="Do not split sentences into separate rows")
    no_comments: bool = Field(default=False, description="Omit bracketed comments")
    no_omitted: bool = Field(default=False, description="Omit rows marked {omittitur}")
    ascii: bool = Field(default=False, description="Rewrite accented characters as ASCII")
    antepost: bool = Field(default=False, description="Prepend $Ante and $Post to expands")

    @field_validator("lang1")
    @classmethod
    def check_lang1(cls, v):
        """Reject an empty primary language."""
        if not v or not v.strip():
            raise ValueError("lang1 must not be empty")
        return v.strip()

    @field_validator("lang2", "reference_language", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat blank strings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @property
    def bilingual(self) -> bool:
        """True when two different languages are displayed side by side."""
        return self.lang2 is not None and self.lang2 != self.lang1

    @property
    def languages(self) -> list[str]:
        """Configured display languages, in column order."""
        return [self.lang1, self.lang2] if self.bilingual else [self.lang1]


class OutputConfig(BaseModel):
    """Configuration for output options."""

    output_dir: Path = Path("data/normalized")
    save_row_tables: bool = True  # CSV files with the aligned row blocks
    overwrite: bool = False


class LanguagesConfig(BaseModel):
    """Language metadata: known names and display codes."""

    names: Optional[list[str]] = Field(default=None, description="Known language names")
    codes: dict[str, str] = Field(default_factory=dict, description="Name -> display code overrides")
    dialog_path: Optional[Path] = Field(default=None, description="horas.dialog file listing the languages")


class Config(BaseModel):
    """Main configuration for the pipeline."""

    input_dir: Optional[Path] = None
    workers: int = Field(default=1, ge=1)
    transform: TransformConfig = Field(default_factory=TransformConfig)
    languages: LanguagesConfig = Field(default_factory=LanguagesConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("input_dir", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.dump_yaml())

    def dump_yaml(self) -> str:
        """Render the configuration as YAML text."""
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
