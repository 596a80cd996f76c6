"""Configuration for CiteShift."""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_COMMAND = "\\citep"

# natbib commands keyed by org-cite style token
DEFAULT_STYLES: dict[str, str] = {
    "t": "\\citet",
    "p": "\\citep",
    "num": "\\citenum",
    "a": "\\citeauthor",
    "a/f": "\\citeauthor*",
    "a/c": "\\Citeauthor",
    "a/cf": "\\Citeauthor*",
    "na": "\\citealp",
    "na/b": "\\citealp",
    "na/f": "\\citealp*",
    "na/c": "\\Citealp",
    "t/b": "\\citealt",
    "t/f": "\\citet*",
    "t/bf": "\\citealt*",
    "t/c": "\\Citet",
    "t/cf": "\\Citet*",
    "t/bc": "\\Citealt",
    "t/bcf": "\\Citealt*",
    "p/f": "\\citep*",
    "p/c": "\\Citep",
    "p/cf": "\\Citep*",
    "y": "\\citeyear",
    "y/p": "\\citeyearpar",
    "nocite": "\\nocite",
}


@dataclass
class EditorConfig:
    """Settings the editing engine is constructed with."""
    styles: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STYLES))
    default_command: str = DEFAULT_COMMAND
    # key -> text shown next to a completion candidate; None uses the bibliography
    annotate: Optional[Callable[[str], str]] = None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CITESHIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # BibTeX file backing year sorts, key suggestions and completion
    bibliography_path: Optional[str] = None

    # Command used when a citation has no style or an unknown one
    default_command: str = DEFAULT_COMMAND

    log_level: str = "INFO"

    def editor_config(self) -> EditorConfig:
        return EditorConfig(default_command=self.default_command)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
