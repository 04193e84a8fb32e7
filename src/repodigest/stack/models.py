"""Data models for the detected technology stack."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ServiceType(str, Enum):
    """Coarse role of a detected service directory."""

    BACKEND = "backend"
    FRONTEND = "frontend"
    MOBILE = "mobile"
    LIBRARY = "library"
    UNKNOWN = "unknown"


class LanguageShare(BaseModel):
    """A language and its share of the project's source files."""

    name: str
    file_count: int
    percentage: float


class Service(BaseModel):
    """A directory inferred to be an independently deployable unit."""

    name: str
    path: str  # relative to the scan root, "." for the root itself
    type: ServiceType = ServiceType.UNKNOWN
    language: str = ""


class StackProfile(BaseModel):
    """Languages, frameworks and services present in a project."""

    languages: list[LanguageShare] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    manifests: list[str] = Field(default_factory=list)
    is_monorepo: bool = False
    has_database: bool = False
    has_infrastructure: bool = False
    has_tests: bool = False

    @property
    def primary_language(self) -> str | None:
        return self.languages[0].name if self.languages else None
