# Schema of the JSON report printed by `shortcodes scan`.

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Argument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str = Field(..., description="Argument name; empty for positional arguments")
    value: str


class Location(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    start: int = Field(..., ge=0, description="Offset of the first character of the opening tag")
    end: int = Field(..., ge=0, description="Offset one past the closing tag")
    content_start: int = Field(..., ge=0)
    content_end: int = Field(..., ge=0)
    self_closing: bool
    arguments: List[Argument] = Field(default_factory=list)
    content: str = ""
    children: List[Location] = Field(default_factory=list)


class ScanError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    message: str
    offset: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None


class DocumentReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str
    ok: bool
    locations: List[Location] = Field(default_factory=list)
    error: Optional[ScanError] = None


class ScanReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    documents: List[DocumentReport] = Field(default_factory=list)


Location.model_rebuild()
