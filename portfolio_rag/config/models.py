"""
Pydantic models for the documents and passages flowing through the system.
"""

from pydantic import BaseModel, ConfigDict, Field


class SourceDocument(BaseModel):
    """A text document loaded from the data folder."""

    model_config = ConfigDict(frozen=True)

    source: str
    text: str


class Passage(BaseModel):
    """A contiguous window of a document's text."""

    model_config = ConfigDict(frozen=True)

    text: str
    source: str
    offset: int = Field(ge=0)
    position: int = Field(default=0, ge=0)

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


class ScoredPassage(BaseModel):
    """A retrieved passage with its cosine similarity to the query."""

    model_config = ConfigDict(frozen=True)

    passage: Passage
    score: float
