"""Pydantic models for CiteShift."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ShiftDirection(str, Enum):
    """Direction a reference moves inside its citation."""
    LEFT = "left"
    RIGHT = "right"


class Motion(str, Enum):
    """Cursor motions over citations."""
    NEXT = "next"
    PREVIOUS = "previous"
    START = "start"
    END = "end"


class CompletionMode(str, Enum):
    """How many keys a completion inserts."""
    SINGLE = "single"
    MULTIPLE = "multiple"


class Reference(BaseModel):
    """One key plus optional prefix/suffix annotation inside a citation."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Bibliography key")
    prefix: str = Field(default="", description="Annotation before the key")
    suffix: str = Field(default="", description="Annotation after the key")
    begin: int = Field(default=0, description="Start offset in the document")
    end: int = Field(default=0, description="End offset in the document")

    @property
    def identity(self) -> tuple[str, str, str]:
        """Structural identity that survives re-parsing."""
        return (self.key, self.prefix, self.suffix)


class Citation(BaseModel):
    """A citation construct and its ordered references."""
    model_config = ConfigDict(frozen=True)

    begin: int = Field(..., description="Offset of the opening bracket")
    end: int = Field(..., description="Offset just past the closing bracket")
    contents_begin: int = Field(..., description="Offset where references start")
    contents_end: int = Field(..., description="Offset of the closing bracket")
    style: Optional[str] = Field(default=None, description="Style token, None when absent")
    references: list[Reference] = Field(default_factory=list)
    global_prefix: str = ""
    global_suffix: str = ""

    @property
    def keys(self) -> list[str]:
        return [ref.key for ref in self.references]


class StyleChoice(BaseModel):
    """A style token offered for selection."""
    token: Optional[str] = Field(..., description="Style token, None for the default style")
    command: str
    current: bool = False


class SpanReplacement(BaseModel):
    """Replace document[begin:end] with text."""
    begin: int
    end: int
    text: str

    def apply(self, document: str) -> str:
        return document[:self.begin] + self.text + document[self.end:]


class EditResult(BaseModel):
    """Outcome of an editing operation."""
    offset: int = Field(..., description="Offset the caller should move to")
    replacement: Optional[SpanReplacement] = None
    warnings: list[str] = Field(default_factory=list)
    clipboard_text: Optional[str] = Field(default=None, description="Text for kill/copy")
    region: Optional[tuple[int, int]] = Field(default=None, description="Region for mark")


class KeySuggestion(BaseModel):
    """A candidate key and how close it is to the requested one."""
    key: str
    score: float


class KeyCandidate(BaseModel):
    """A bibliography key offered for completion."""
    key: str
    annotation: str = ""


# Request bodies

class DocumentContext(BaseModel):
    """Document text plus the current offset."""
    text: str
    offset: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _offset_in_document(self) -> "DocumentContext":
        if self.offset > len(self.text):
            raise ValueError("offset is past the end of the document")
        return self


class StyleUpdateRequest(DocumentContext):
    style: Optional[str] = Field(default=None, description="New style token, empty to remove")


class AnnotationRequest(DocumentContext):
    prefix: str = ""
    suffix: str = ""


class KeyReplaceRequest(DocumentContext):
    key: str = Field(..., min_length=1)


class InsertKeysRequest(DocumentContext):
    keys: list[str] = Field(..., min_length=1)
