from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class UserIdentity:
    """One detected person, shared by its username key and its email key."""

    ordinal: int
    username: Optional[str] = None
    email: Optional[str] = None


@dataclass
class DomainAlias:
    original: str
    alias: str
    ordinal: int


class AuditRecord(BaseModel):
    """One distinct original value and what it was replaced with."""

    model_config = ConfigDict(populate_by_name=True)

    original_value: str = Field(alias="OriginalValue")
    new_value: str = Field(alias="NewValue")
    times_replaced: int = Field(default=1, alias="TimesReplaced")
    type: str = Field(alias="Type")
    source: str = Field(default="", alias="Source")


class JSONFailure(BaseModel):
    line_number: int
    error: str
    sample_content: str


@dataclass
class LineResult:
    """Outcome of scrubbing a single line."""

    text: str
    is_json: bool = False
    reverted: bool = False
    error: Optional[str] = None


@dataclass
class PipelineStats:
    total_lines: int = 0
    processed_lines: int = 0
    empty_lines: int = 0
    failed_lines: int = 0
