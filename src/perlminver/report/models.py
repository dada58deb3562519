"""Pydantic models for per-file and batch version reports."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MarkerReport(BaseModel):
    version: str
    rules: list[str]


class FileReport(BaseModel):
    path: str
    minimum: str | None = None
    explicit: str | None = None  # None = no declaration
    syntax: str | None = None  # None = no syntax evidence
    inconsistent: bool = False  # explicit declaration below syntax requirement
    markers: list[MarkerReport] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchReport(BaseModel):
    files: list[FileReport] = Field(default_factory=list)
    minimum: str | None = None
    inconsistent: list[str] = Field(default_factory=list)
    errors: int = 0
